import asyncio
import io
from typing import AsyncGenerator

import pikepdf
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from paperlens.core.observer import ExtractionEvent, ExtractionObserver
from paperlens.services.extraction.loader import LoadedDocument


def _pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[list[str]], info: dict[str, str] | None = None) -> bytes:
    """Build a PDF with one Helvetica text line per entry and a valid xref table."""
    bodies: list[bytes] = []

    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)

    bodies.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    bodies.append(f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode())
    bodies.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    for pid, lines in zip(page_ids, pages):
        bodies.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Contents {pid + 1} 0 R /Resources << /Font << /F1 3 0 R >> >> >>"
            ).encode()
        )
        ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        for line in lines:
            ops.append(f"({_pdf_string(line)}) Tj T*")
        ops.append("ET")
        stream = "\n".join(ops).encode()
        bodies.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    info_ref = ""
    if info:
        entries = " ".join(f"/{k} ({_pdf_string(v)})" for k, v in info.items())
        bodies.append(f"<< {entries} >>".encode())
        info_ref = f" /Info {len(bodies)} 0 R"

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(bodies, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(bodies) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += f"trailer\n<< /Size {len(bodies) + 1} /Root 1 0 R{info_ref} >>\n".encode()
    out += b"startxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


class FakeDocument(LoadedDocument):
    """Scripted document: per-page fragments, failures and completion delays."""

    def __init__(
        self,
        pages: list[list[str]],
        failing_pages: set[int] | None = None,
        delays: dict[int, float] | None = None,
        metadata: dict[str, str] | None = None,
        metadata_error: Exception | None = None,
    ):
        self.pages = pages
        self.failing_pages = failing_pages or set()
        self.delays = delays or {}
        self.metadata = metadata or {}
        self.metadata_error = metadata_error
        self.completion_order: list[int] = []
        self.requested: list[int] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    async def get_text_fragments(self, page_number: int) -> list[str]:
        self.requested.append(page_number)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(page_number, 0))
            if page_number in self.failing_pages:
                raise RuntimeError(f"broken content stream on page {page_number}")
            self.completion_order.append(page_number)
            return list(self.pages[page_number - 1])
        finally:
            self.in_flight -= 1

    def get_metadata(self) -> dict[str, str]:
        if self.metadata_error is not None:
            raise self.metadata_error
        return dict(self.metadata)

    def close(self) -> None:
        self.closed = True


class RecordingObserver(ExtractionObserver):
    def __init__(self):
        self.events: list[ExtractionEvent] = []

    def on_event(self, event: ExtractionEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[str]:
        return [e.kind.value for e in self.events]


@pytest.fixture
def pdf_builder():
    return build_pdf


@pytest.fixture
def fake_document():
    return FakeDocument


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def numbered_pages():
    """Fragments for N pages whose text is 'Page <n> body text'."""

    def _pages(count: int) -> list[list[str]]:
        return [["Page", str(n), "body", "text"] for n in range(1, count + 1)]

    return _pages


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return build_pdf(
        [
            ["Deep Learning for Protein Folding", "Abstract", "We study folding with neural networks"],
            ["Introduction", "Proteins fold into structures"],
            ["Results and Discussion", "References"],
        ],
        info={"Title": "Protein Folding Study", "Author": "Ada Lovelace"},
    )


@pytest.fixture
def encrypted_pdf_bytes() -> bytes:
    """One-page PDF protected with the user password 'secret'."""
    out = io.BytesIO()
    with pikepdf.open(io.BytesIO(build_pdf([["Hello world"]]))) as pdf:
        pdf.save(out, encryption=pikepdf.Encryption(owner="owner-secret", user="secret", R=4, aes=True))
    return out.getvalue()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    from paperlens.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
