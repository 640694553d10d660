"""Shared fixtures for the prefix swap test suite."""

import io
import zipfile

import pytest

from prefix_swap.core.config import Settings

SAMPLE_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\r\n'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">\r\n'
    "<w:body>"
    "<w:p><w:r><w:t>{цикл(item из a.list)}</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>{если(a.flag)}</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Имя: {a.name}</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>{a.longer.name}</w:t></w:r></w:p>"
    "</w:body>\r\n"
    "</w:document>\r\n"
)


def build_docx(document_xml: str | None) -> bytes:
    """Build a minimal .docx archive in memory.

    Args:
        document_xml: Content of word/document.xml, or None to leave it out.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(
            "[Content_Types].xml",
            "<?xml version='1.0'?><Types xmlns='http://schemas.openxmlformats.org/package/2006/content-types'>"
            "<Default Extension='xml' ContentType='application/xml'/></Types>",
        )
        zf.writestr(
            "_rels/.rels",
            "<?xml version='1.0'?><Relationships xmlns='http://schemas.openxmlformats.org/package/2006/relationships'/>",
        )
        if document_xml is not None:
            zf.writestr("word/document.xml", document_xml.encode("utf-8"))
    return buffer.getvalue()


def build_fdt(inner_docx: bytes, inner_name: str = "template.docx") -> bytes:
    """Wrap a .docx archive in an .fdt container."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("manifest.xml", "<manifest/>")
        zf.writestr(inner_name, inner_docx)
    return buffer.getvalue()


@pytest.fixture
def sample_xml():
    """Document XML with loop, conditional and plain fields under prefix 'a.'."""
    return SAMPLE_XML


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary directory."""
    return Settings(
        upload_dir=tmp_path / "uploads",
        config_path=tmp_path / "config.json",
        work_dir=tmp_path,
    )


@pytest.fixture
def make_docx():
    """Factory building .docx bytes from document XML."""
    return build_docx


@pytest.fixture
def make_fdt():
    """Factory wrapping .docx bytes in an .fdt container."""
    return build_fdt


@pytest.fixture
def corrupt_docx(sample_xml):
    """A .docx whose document part no longer matches its stored CRC."""
    data = bytearray(build_docx(sample_xml))
    offset = data.index("{a.name}".encode("utf-8"))
    data[offset + 1] ^= 0x01
    return bytes(data)
