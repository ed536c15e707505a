import io
import pytest

from ..adapters.text_adapter import TextAdapter
from ..adapters import ContentProcessingError, get_adapter


@pytest.mark.asyncio
async def test_text_adapter_extract_text_and_metadata():
    adapter = TextAdapter()
    content = "Line 1\nLine 2\nLine 3\nLine 4\nLine 5\nLine 6"
    f = io.BytesIO(content.encode("utf-8"))

    assert await adapter.is_valid(f) is True

    text = await adapter.extract_text(f)
    assert text == content

    meta = await adapter.extract_metadata(f)
    assert meta["size_bytes"] == len(content.encode("utf-8"))
    assert meta["line_count"] == 6
    assert meta["word_count"] == 12
    assert meta["encoding"] == "utf-8"
    assert meta["preview"] == "Line 1\nLine 2\nLine 3\nLine 4\nLine 5"


@pytest.mark.asyncio
async def test_text_adapter_invalid_utf8():
    adapter = TextAdapter()
    f = io.BytesIO(b"\xff\xfe\xfa\x00")

    assert await adapter.is_valid(f) is False

    with pytest.raises(ContentProcessingError):
        await adapter.extract_text(f)


@pytest.mark.asyncio
async def test_text_adapter_multibyte_at_chunk_boundary():
    adapter = TextAdapter()
    # 1023 ASCII bytes followed by a two byte character splits the first chunk
    data = b"a" * 1023 + "é".encode("utf-8") + b" tail"
    assert await adapter.is_valid(io.BytesIO(data)) is True


@pytest.mark.parametrize("filename,expected", [
    ("notes.txt", "TextAdapter"),
    ("README.md", "TextAdapter"),
    ("grades.csv", "TextAdapter"),
    ("data.json", "TextAdapter"),
    ("handout.pdf", "PDFAdapter"),
    ("essay.docx", "DocxAdapter"),
])
def test_get_adapter_by_extension(filename, expected):
    assert type(get_adapter(filename)).__name__ == expected


def test_get_adapter_unknown_extension():
    assert get_adapter("archive.xyz") is None
