from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fakes import FakeAnnotation, FakeBackend, FakePage, FakePdf
from pdfium_bindings import (
    Annotation,
    AnnotationRect,
    Document,
    DocumentLoadError,
    OperationError,
    UnsupportedOperationError,
    open_document,
)
from pdfium_bindings.codes import AnnotationSubtype, ErrorCode


def test_open_and_close_document(backend: FakeBackend) -> None:
    document = open_document("sample.pdf", backend=backend)

    assert not document.closed
    assert document.page_count() == 3
    assert backend.open_handles() == ["document"]

    document.close()
    document.close()

    assert document.closed
    assert backend.released == ["document"]
    assert backend.open_handles() == []


def test_context_manager_closes_document(backend: FakeBackend) -> None:
    with Document(Path("sample.pdf"), backend=backend) as document:
        assert document.page_count() == 3

    assert document.closed
    assert "CLOSED" in repr(document)


def test_missing_file_reports_error_code(backend: FakeBackend) -> None:
    with pytest.raises(DocumentLoadError) as excinfo:
        Document("missing.pdf", backend=backend)

    assert excinfo.value.error_code == ErrorCode.FILE
    assert str(excinfo.value) == "Failed to load PDF document: File not found or could not be opened"
    assert backend.open_handles() == []


@pytest.mark.parametrize("password", [None, "wrong"])
def test_password_required(backend: FakeBackend, password) -> None:
    with pytest.raises(DocumentLoadError, match="Password required or incorrect password") as excinfo:
        Document("locked.pdf", password, backend=backend)

    assert excinfo.value.error_code == 4


def test_password_opens_encrypted_document(backend: FakeBackend) -> None:
    with Document("locked.pdf", "secret", backend=backend) as document:
        assert document.page_count() == 1


def test_empty_document_has_no_pages(backend: FakeBackend) -> None:
    with Document("empty.pdf", backend=backend) as document:
        assert document.page_count() == 0
        assert document.annotations() == []
        with pytest.raises(OperationError, match="Failed to load page 0"):
            document.dimensions()


def test_open_from_bytes(backend: FakeBackend) -> None:
    with Document.from_bytes(b"%PDF-in-memory", backend=backend) as document:
        assert document.path is None
        assert document.page_count() == 3
        assert "<memory>" in repr(document)


def test_both_constructors_set_same_attributes(backend: FakeBackend) -> None:
    from_path = Document("locked.pdf", "secret", backend=backend)
    from_memory = Document.from_bytes(b"%PDF-in-memory", "pw", backend=backend)

    assert set(vars(from_path)) == set(vars(from_memory))
    assert (from_path.password, from_memory.password) == ("secret", "pw")
    assert from_path.backend is from_memory.backend is backend

    from_path.close()
    from_memory.close()
    assert backend.open_handles() == []


def test_open_from_unknown_bytes(backend: FakeBackend) -> None:
    with pytest.raises(DocumentLoadError):
        Document.from_bytes(b"not a pdf", backend=backend)


def test_page_count_after_close(document: Document) -> None:
    document.close()

    with pytest.raises(OperationError, match="Document handle is invalid or has been closed"):
        document.page_count()


def test_load_page_after_close(document: Document, backend: FakeBackend) -> None:
    document.close()
    backend.calls.clear()

    with pytest.raises(OperationError, match="Document handle is invalid or has been closed"):
        document.load_page(0)

    assert "load_page" not in backend.calls


@pytest.mark.parametrize("page_index", [3, 10, -1])
def test_load_page_out_of_range(document: Document, page_index: int) -> None:
    with pytest.raises(OperationError) as excinfo:
        document.load_page(page_index)

    assert str(excinfo.value) == f"Failed to load page {page_index}: Page not found or content error"
    assert excinfo.value.error_code == ErrorCode.PAGE


def test_loaded_page_belongs_to_caller(document: Document, backend: FakeBackend) -> None:
    page = document.load_page(1)

    assert page.is_open
    assert (page.width, page.height) == (200.0, 300.0)
    assert backend.open_handles("page") == ["page"]

    page.close()
    page.close()

    assert not page.is_open
    assert backend.open_handles("page") == []
    with pytest.raises(OperationError, match="Page handle is invalid or has been closed"):
        _ = page.width


def test_dimensions(document: Document, backend: FakeBackend) -> None:
    assert document.dimensions() == (612.0, 792.0)
    assert document.dimensions_for_page(1) == (200.0, 300.0)
    assert backend.open_handles() == ["document"]


def test_dimensions_release_page_on_failure(fake_pdf: FakePdf) -> None:
    backend = FakeBackend({"sample.pdf": fake_pdf}, missing={"get_page_width"})

    with Document("sample.pdf", backend=backend) as document:
        with pytest.raises(UnsupportedOperationError, match="get_page_width"):
            document.dimensions()
        with pytest.raises(UnsupportedOperationError):
            document.dimensions_for_page(1)

        assert backend.open_handles() == ["document"]
        assert backend.released.count("page") == 2


def test_annotations_in_page_order(document: Document, backend: FakeBackend) -> None:
    annotations = document.annotations()

    assert [(a.page, a.index, a.subtype) for a in annotations] == [
        (0, 0, "HIGHLIGHT"),
        (1, 0, "TEXT"),
        (1, 2, "STAMP"),
        (2, 0, "UNKNOWN_42"),
    ]
    assert backend.open_handles() == ["document"]
    assert backend.released.count("annotation") == 4


def test_annotation_fields(document: Document) -> None:
    highlight = document.annotations_by_page(0)[0]

    assert highlight == Annotation(
        page=0,
        index=0,
        subtype="HIGHLIGHT",
        subtype_code=AnnotationSubtype.HIGHLIGHT,
        rect=AnnotationRect(left=10.0, bottom=20.0, right=110.0, top=40.0),
        contents="Check this",
    )
    assert str(highlight) == "Annotation(page=0, index=0, subtype=HIGHLIGHT)"


def test_annotation_contents_decoding(document: Document) -> None:
    note, stamp = document.annotations_by_page(1)

    assert note.contents == "Note ü中"
    assert stamp.contents == ""


def test_unknown_subtype_and_unordered_rect(document: Document) -> None:
    (annotation,) = document.annotations_by_page(2)

    assert annotation.subtype == "UNKNOWN_42"
    assert annotation.subtype_code == 42
    assert annotation.rect == AnnotationRect(left=90.0, bottom=80.0, right=10.0, top=5.0)
    assert annotation.contents == ""


def test_rect_failure_releases_handles() -> None:
    pdf = FakePdf(pages=[FakePage(annotations=[FakeAnnotation(AnnotationSubtype.SQUARE, (0, 0, 1, 1), rect_ok=False)])])
    backend = FakeBackend({"broken.pdf": pdf})

    with Document("broken.pdf", backend=backend) as document:
        with pytest.raises(OperationError, match="Failed to get rectangle of annotation 0 on page 0"):
            document.annotations()
        assert backend.open_handles() == ["document"]


def test_missing_annotation_support(fake_pdf: FakePdf) -> None:
    backend = FakeBackend({"sample.pdf": fake_pdf}, missing={"get_annot_count"})

    with Document("sample.pdf", backend=backend) as document:
        assert document.page_count() == 3
        with pytest.raises(UnsupportedOperationError, match="not available in your PDFium library"):
            document.annotations()
        assert backend.open_handles() == ["document"]


def test_close_failure_is_logged(fake_pdf: FakePdf, caplog: pytest.LogCaptureFixture) -> None:
    backend = FakeBackend({"sample.pdf": fake_pdf}, failing_releases={"document"})
    document = Document("sample.pdf", backend=backend)

    with caplog.at_level(logging.WARNING):
        document.close()

    assert document.closed
    assert "Error closing document handle" in caplog.text
