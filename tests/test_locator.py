"""Tests for locating date-named images."""

import tempfile
from pathlib import Path
from unittest import TestCase

from imagegrid.exceptions import DirectoryNotFound
from imagegrid.locator import (
    ImageLocator,
    SearchCriteria,
    build_filename_pattern,
    search_for_images,
)


def _touch(root: Path, relative: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b'fake image data')
    return path


class TestFilenamePattern(TestCase):
    """Test the basename acceptance rule."""

    def setUp(self):
        self.pattern = build_filename_pattern(['.jpg', '.png'])

    def test_accepts_date_prefixed_names(self):
        for name in ['20210101.jpg', '20210101_beach.jpg', '20211231 party.PNG', '12345678xyz.Jpg']:
            self.assertIsNotNone(self.pattern.match(name), name)

    def test_rejects_other_names(self):
        for name in ['2021010.jpg', 'IMG_20210101.jpg', '20210101.jpeg',
                     '20210101.gif', '20210101.jpg.txt', 'a20210101.jpg']:
            self.assertIsNone(self.pattern.match(name), name)

    def test_rejects_trailing_newline(self):
        self.assertIsNone(self.pattern.match('20210101.jpg\n'))
        criteria = SearchCriteria.create('/tmp', ['.jpg'])
        self.assertFalse(criteria.matches('20210101.jpg\n'))
        self.assertTrue(criteria.matches('20210101.jpg'))

    def test_extension_is_escaped(self):
        pattern = build_filename_pattern(['.j.g'])
        self.assertIsNotNone(pattern.match('20210101.j.g'))
        self.assertIsNone(pattern.match('20210101.jpg'))


class TestSearchCriteria(TestCase):
    """Test SearchCriteria construction."""

    def test_extensions_normalized(self):
        criteria = SearchCriteria.create('/tmp', ['JPG', '.Png', 'jpg'])
        self.assertEqual(criteria.allowed_extensions, frozenset({'.jpg', '.png'}))
        self.assertTrue(criteria.matches('20200202.PNG'))

    def test_empty_extensions_rejected(self):
        with self.assertRaises(ValueError):
            SearchCriteria.create('/tmp', [])


class TestImageLocator(TestCase):
    """Test ImageLocator searches."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self):
        self._tmp.cleanup()

    def test_filters_by_pattern_and_extension(self):
        _touch(self.root, '20210105_a.jpg')
        _touch(self.root, 'sub/20210103.JPEG')
        _touch(self.root, 'sub/deeper/20210101.png')
        _touch(self.root, 'notes.txt')
        _touch(self.root, 'IMG_0001.jpg')
        _touch(self.root, '20210102.gif')
        (self.root / '20210109.jpg.d').mkdir()

        result = search_for_images(self.root, ['.jpg', '.jpeg'])

        names = sorted(path.name for path in result.files)
        self.assertEqual(names, ['20210103.JPEG', '20210105_a.jpg'])
        self.assertEqual(result.duplicates, [])
        for path in result.files:
            self.assertTrue(path.is_absolute())

    def test_directories_are_excluded(self):
        (self.root / '20210101.jpg').mkdir()
        result = search_for_images(self.root, ['.jpg'])
        self.assertEqual(result.files, [])

    def test_duplicate_basenames_keep_first_in_path_order(self):
        first = _touch(self.root, 'a/20210101.jpg')
        second = _touch(self.root, 'b/20210101.JPG')
        third = _touch(self.root, 'c/deep/20210101.jpg')
        other = _touch(self.root, 'b/20210102.jpg')

        result = search_for_images(self.root, ['.jpg'])

        self.assertEqual(result.files, [first, other])
        self.assertEqual([d.path for d in result.duplicates], [second, third])
        for duplicate in result.duplicates:
            self.assertEqual(duplicate.kept_path, first)

    def test_search_is_repeatable(self):
        for relative in ['z/20200101.jpg', 'a/20200101.jpg', 'm/20200101.jpg']:
            _touch(self.root, relative)

        first = search_for_images(self.root, ['.jpg'])
        second = search_for_images(self.root, ['.jpg'])

        self.assertEqual(first.files, second.files)
        self.assertEqual(first.files, [self.root / 'a' / '20200101.jpg'])
        self.assertEqual(len(first.duplicates), 2)

    def test_empty_result_is_not_an_error(self):
        _touch(self.root, 'readme.md')
        result = search_for_images(self.root, ['.png'])
        self.assertFalse(result)
        self.assertEqual(len(result), 0)

    def test_missing_directory(self):
        criteria = SearchCriteria.create(self.root / 'missing', ['.jpg'])
        with self.assertRaises(DirectoryNotFound) as ctx:
            ImageLocator().search(criteria)
        self.assertIn('missing', str(ctx.exception))

    def test_file_as_root(self):
        path = _touch(self.root, '20210101.jpg')
        with self.assertRaises(DirectoryNotFound) as ctx:
            search_for_images(path, ['.jpg'])
        self.assertIn('not a directory', str(ctx.exception))

    def test_hidden_paths_are_skipped(self):
        visible = _touch(self.root, '20210101.jpg')
        _touch(self.root, '.picasaoriginals/20210101.jpg')
        _touch(self.root, '.thumbnails/deep/20210102.jpg')
        _touch(self.root, 'album/.20210103.jpg')

        result = search_for_images(self.root, ['.jpg'])

        self.assertEqual(result.files, [visible])
        self.assertEqual(result.duplicates, [])

    def test_name_with_trailing_newline_is_ignored(self):
        visible = _touch(self.root, '20210101.jpg')
        _touch(self.root, '20210102.jpg\n')

        result = search_for_images(self.root, ['.jpg'])

        self.assertEqual(result.files, [visible])
