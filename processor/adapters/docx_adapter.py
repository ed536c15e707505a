"""
DOCX adapter.

A .docx file is a zip archive; paragraph text lives in ``word/document.xml``
and the core properties in ``docProps/core.xml``. Both are read with the
standard library XML parser.
"""

import io
import zipfile
import xml.etree.ElementTree as ET
from typing import List, Dict, BinaryIO

from . import ContentAdapter, ContentProcessingError

WORD_NS = {'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main'}
CORE_NS = {
    'cp': 'http://schemas.openxmlformats.org/package/2006/metadata/core-properties',
    'dc': 'http://purl.org/dc/elements/1.1/',
    'dcterms': 'http://purl.org/dc/terms/',
}
REQUIRED_PARTS = ('[Content_Types].xml', '_rels/.rels', 'word/document.xml')


def _paragraphs(docx_zip: zipfile.ZipFile) -> List[str]:
    if 'word/document.xml' not in docx_zip.namelist():
        return []
    with docx_zip.open('word/document.xml') as doc_file:
        root = ET.parse(doc_file).getroot()

    paragraphs = []
    for para in root.iter(f"{{{WORD_NS['w']}}}p"):
        text = ''.join(run.text or '' for run in para.iter(f"{{{WORD_NS['w']}}}t"))
        if text.strip():
            paragraphs.append(text)
    return paragraphs


def _xml_text(element, path: str) -> str:
    found = element.find(path, CORE_NS)
    return found.text if found is not None and found.text else ""


class DocxAdapter(ContentAdapter):
    """Adapter for Word (.docx) documents."""

    @classmethod
    def supported_mime_types(cls) -> List[str]:
        return [
            'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
        ]

    async def extract_text(self, file: BinaryIO, **kwargs) -> str:
        file.seek(0)
        try:
            with zipfile.ZipFile(io.BytesIO(file.read())) as docx_zip:
                return '\n\n'.join(_paragraphs(docx_zip))
        except (zipfile.BadZipFile, ET.ParseError) as e:
            raise ContentProcessingError(f"Error extracting text from DOCX: {e}") from e

    async def extract_metadata(self, file: BinaryIO) -> Dict:
        file.seek(0)
        data = file.read()
        file.seek(0)

        metadata: Dict = {}
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as docx_zip:
                if 'docProps/core.xml' in docx_zip.namelist():
                    with docx_zip.open('docProps/core.xml') as core_file:
                        root = ET.parse(core_file).getroot()
                    metadata['title'] = _xml_text(root, 'dc:title')
                    metadata['subject'] = _xml_text(root, 'dc:subject')
                    metadata['creator'] = _xml_text(root, 'dc:creator')
                    created = _xml_text(root, 'dcterms:created')
                    if created:
                        metadata['created'] = created
                paragraphs = _paragraphs(docx_zip)
        except (zipfile.BadZipFile, ET.ParseError) as e:
            raise ContentProcessingError(f"Error extracting DOCX metadata: {e}") from e

        text = '\n\n'.join(paragraphs)
        metadata.update({
            'size_bytes': len(data),
            'paragraph_count': len(paragraphs),
            'preview': text[:500],
            'file_type': 'DOCX',
        })
        return metadata

    async def is_valid(self, file: BinaryIO) -> bool:
        """Check for the zip header and the parts every .docx must have."""
        try:
            file.seek(0)
            if file.read(4) != b'PK\x03\x04':
                return False
            file.seek(0)
            with zipfile.ZipFile(io.BytesIO(file.read())) as zipf:
                names = zipf.namelist()
                return all(part in names for part in REQUIRED_PARTS)
        except zipfile.BadZipFile:
            return False
        finally:
            file.seek(0)
