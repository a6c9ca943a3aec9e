"""Tests for filename stem sanitization and chapter prefix stripping."""

from audiobook_splitter.sanitize import sanitize_stem, strip_chapter_prefix


class TestSanitizeStem:
    def test_spaces_become_hyphens(self):
        assert sanitize_stem("The Dark Forest") == "The-Dark-Forest"

    def test_drops_punctuation(self):
        assert sanitize_stem("Hello,  World!") == "Hello-World"

    def test_collapses_hyphens(self):
        assert sanitize_stem("a---b") == "a-b"

    def test_trims_hyphens(self):
        assert sanitize_stem(" - leading - ") == "leading"

    def test_non_ascii_dropped(self):
        assert sanitize_stem("Café Society") == "Caf-Society"

    def test_keeps_digits(self):
        assert sanitize_stem("Book 2") == "Book-2"

    def test_empty_result(self):
        assert sanitize_stem("???") == ""
        assert sanitize_stem("") == ""


class TestStripChapterPrefix:
    def test_strips_number_colon(self):
        assert strip_chapter_prefix("3: Threats") == "Threats"

    def test_strips_without_space(self):
        assert strip_chapter_prefix("12:Threats") == "Threats"

    def test_leaves_other_titles(self):
        assert strip_chapter_prefix("Chapter 3: Threats") == "Chapter 3: Threats"
        assert strip_chapter_prefix("3 Threats") == "3 Threats"
