import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.services.upload_security import (  # noqa: E402
    canonical_youtube_url,
    ensure_allowed_extension,
    extract_youtube_id,
    resolve_mime_type,
    safe_temp_name,
    validate_upload_signature,
)


class UploadSecurityTests(unittest.TestCase):
    def test_allowed_extensions_are_case_insensitive(self):
        self.assertEqual(ensure_allowed_extension("Deck.PDF"), "pdf")
        self.assertEqual(ensure_allowed_extension("clip.MoV"), "mov")
        with self.assertRaises(ValueError):
            ensure_allowed_extension("notes.txt")
        with self.assertRaises(ValueError):
            ensure_allowed_extension("no-extension")

    def test_declared_mime_wins_unless_generic(self):
        self.assertEqual(resolve_mime_type("a.pdf", "application/pdf"), "application/pdf")
        self.assertEqual(resolve_mime_type("a.jpg", "image/jpeg; charset=binary"), "image/jpeg")
        self.assertEqual(resolve_mime_type("a.webp", None), "image/webp")
        self.assertEqual(resolve_mime_type("a.mov", "application/octet-stream"), "video/quicktime")

    def test_temp_name_strips_directories_and_unsafe_characters(self):
        self.assertEqual(safe_temp_name("../../etc/passwd"), "passwd")
        self.assertEqual(safe_temp_name("C:\\Users\\me\\report.pdf"), "report.pdf")
        self.assertEqual(safe_temp_name("quarterly review (final).pdf"), "quarterly_review_final_.pdf")
        self.assertEqual(safe_temp_name("..."), "upload")

    def test_signatures(self):
        validate_upload_signature(filename="a.pdf", content=b"%PDF-1.7\n")
        validate_upload_signature(filename="a.png", content=b"\x89PNG\r\n\x1a\n....")
        validate_upload_signature(filename="a.jpg", content=b"\xff\xd8\xff\xe0....")
        validate_upload_signature(filename="a.webp", content=b"RIFF\x00\x00\x00\x00WEBPVP8 ")
        validate_upload_signature(filename="a.mov", content=b"\x00\x00\x00\x14ftypqt  \x00\x00")
        with self.assertRaises(ValueError):
            validate_upload_signature(filename="a.png", content=b"%PDF-1.7\n")
        with self.assertRaises(ValueError):
            validate_upload_signature(filename="a.mp4", content=b"short")

    def test_youtube_id_extraction(self):
        video_id = "dQw4w9WgXcQ"
        self.assertEqual(extract_youtube_id(f"https://www.youtube.com/watch?v={video_id}&t=42"), video_id)
        self.assertEqual(extract_youtube_id(f"https://youtu.be/{video_id}"), video_id)
        self.assertEqual(extract_youtube_id(f"https://m.youtube.com/shorts/{video_id}"), video_id)
        self.assertEqual(extract_youtube_id(f"https://www.youtube.com/embed/{video_id}"), video_id)
        self.assertIsNone(extract_youtube_id("https://www.youtube.com/channel/UC123"))
        self.assertIsNone(extract_youtube_id("https://example.com/watch?v=dQw4w9WgXcQ"))

    def test_canonical_youtube_url(self):
        self.assertEqual(
            canonical_youtube_url("  YOUTU.BE/dQw4w9WgXcQ "),
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        )
        with self.assertRaises(ValueError):
            canonical_youtube_url("")
        with self.assertRaises(ValueError):
            canonical_youtube_url("ftp://youtube.com/watch?v=dQw4w9WgXcQ")
        with self.assertRaises(ValueError):
            canonical_youtube_url("https://vimeo.com/76979871")


if __name__ == "__main__":
    unittest.main()
