from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fakes import FakeAnnotation, FakeBackend, FakeLink, FakePage, FakePdf  # noqa: E402
from pdfium_bindings import Document, TextPage  # noqa: E402
from pdfium_bindings.codes import AnnotationSubtype  # noqa: E402

SAMPLE_TEXT = "Hello world, hello PDFium. Visit https://example.com today."
LINK_START = SAMPLE_TEXT.index("https://")


@pytest.fixture()
def fake_pdf() -> FakePdf:
    return FakePdf(
        pages=[
            FakePage(
                width=612.0,
                height=792.0,
                text=SAMPLE_TEXT,
                annotations=[
                    FakeAnnotation(AnnotationSubtype.HIGHLIGHT, (10.0, 20.0, 110.0, 40.0), "Check this"),
                ],
                links=[
                    FakeLink("https://example.com", LINK_START, len("https://example.com")),
                    FakeLink("", 0, 5),
                ],
            ),
            FakePage(
                width=200.0,
                height=300.0,
                annotations=[
                    FakeAnnotation(AnnotationSubtype.TEXT, (1.0, 2.0, 3.0, 4.0), "Note ü中"),
                    None,
                    FakeAnnotation(AnnotationSubtype.STAMP, (5.0, 6.0, 7.0, 8.0)),
                ],
            ),
            FakePage(
                annotations=[
                    FakeAnnotation(42, (90.0, 80.0, 10.0, 5.0), ""),
                ],
            ),
        ]
    )


@pytest.fixture()
def backend(fake_pdf: FakePdf) -> FakeBackend:
    return FakeBackend(
        {
            "sample.pdf": fake_pdf,
            "empty.pdf": FakePdf(),
            "locked.pdf": FakePdf(pages=[FakePage()], password="secret"),
        },
        memory={b"%PDF-in-memory": fake_pdf},
    )


@pytest.fixture()
def document(backend: FakeBackend) -> Iterator[Document]:
    doc = Document("sample.pdf", backend=backend)
    yield doc
    doc.close()


@pytest.fixture()
def text_page(document: Document) -> Iterator[TextPage]:
    page = document.load_page(0)
    text = TextPage.load(page)
    yield text
    text.close()
    page.close()


# ----------------------------------------------------------------------
# Real PDF files for tests against the PDFium shared library
# ----------------------------------------------------------------------
@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=200, height=300)
    writer.add_metadata({"/Producer": "pdfium-bindings-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def text_pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, text: str, password: str | None = None) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        page = writer.add_blank_page(width=612, height=792)

        font = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/Helvetica"),
            }
        )
        page[NameObject("/Resources")] = DictionaryObject(
            {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})}
        )
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 24 Tf 72 700 Td ({text}) Tj ET".encode("latin-1"))
        page[NameObject("/Contents")] = writer._add_object(content)

        if password is not None:
            writer.encrypt(password)
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def annotated_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "annotated.pdf"
    writer = PdfWriter()
    page = writer.add_blank_page(width=612, height=792)

    note = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Text"),
            NameObject("/Rect"): ArrayObject(
                [FloatObject(10), FloatObject(20), FloatObject(110), FloatObject(40)]
            ),
            NameObject("/Contents"): TextStringObject("Review this"),
        }
    )
    page[NameObject("/Annots")] = ArrayObject([writer._add_object(note)])

    with path.open("wb") as handle:
        writer.write(handle)
    return path
