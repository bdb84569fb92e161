"""
Uploaded image → embeddable data URI.

• Bytes are checked with Pillow and embedded unchanged (no transcoding).
• Encoding runs on a background thread; results wait in a queue until the
  owner calls apply_completed() from its own thread.
• Every job remembers the generation of the session it was started for and
  is dropped if that session is no longer the live one.
"""
from __future__ import annotations
import base64
import io
import itertools
import logging
import queue
import struct
import threading
import time
from dataclasses import dataclass
from typing import List, Union

from PIL import Image

from edit_session import EditSession
from errors import ImageIngestError, InvalidEditError

log = logging.getLogger(__name__)

PROFILE_TARGET = "profile"

APPLIED = "applied"
FAILED = "failed"
STALE = "stale"

# what a broken file can make Pillow raise while identifying or verifying it
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, struct.error,
                  Image.DecompressionBombError)


def encode_image(payload: bytes) -> str:
    """Return a data URI for *payload*; raise ImageIngestError if it is no image."""
    if not payload:
        raise ImageIngestError("file is empty")
    try:
        with Image.open(io.BytesIO(payload)) as img:
            fmt = img.format
            img.verify()
    except _DECODE_ERRORS as e:
        raise ImageIngestError(f"unreadable image: {e}") from e
    mime = Image.MIME.get(fmt or "", "application/octet-stream")
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def accept_url(text: str) -> str:
    """External image url path: stored as typed."""
    return text


@dataclass(frozen=True)
class IngestTicket:
    job_id: int
    generation: int
    target: Union[str, int]  # PROFILE_TARGET or a work id


@dataclass(frozen=True)
class IngestOutcome:
    ticket: IngestTicket
    status: str
    error: str = ""


class ImageIngestor:
    def __init__(self):
        self._done: "queue.Queue[tuple]" = queue.Queue()
        self._threads: List[threading.Thread] = []
        self._job_ids = itertools.count(1)
        self._lock = threading.Lock()

    def ingest_file(self, session: EditSession, target: Union[str, int], payload: bytes) -> IngestTicket:
        """Start encoding *payload* for *target* in *session*; returns at once."""
        ticket = IngestTicket(next(self._job_ids), session.generation, target)
        worker = threading.Thread(target=self._run, args=(ticket, payload), daemon=True)
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(worker)
        worker.start()
        return ticket

    def _run(self, ticket: IngestTicket, payload: bytes):
        try:
            self._done.put((ticket, encode_image(payload), None))
        except ImageIngestError as e:
            self._done.put((ticket, None, e))
        except Exception as e:
            # the owner still has to hear about the job, or it waits forever
            log.exception("Upload %d crashed while encoding", ticket.job_id)
            self._done.put((ticket, None, e))

    def wait(self, timeout: float | None = None) -> bool:
        """Block until running jobs finish. False if *timeout* ran out first."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            threads = list(self._threads)
        for t in threads:
            t.join(None if deadline is None else max(0.0, deadline - time.monotonic()))
        return not any(t.is_alive() for t in threads)

    def pending(self) -> int:
        with self._lock:
            return sum(t.is_alive() for t in self._threads)

    def apply_completed(self, session: EditSession | None) -> List[IngestOutcome]:
        """Apply every finished job that still belongs to *session*."""
        outcomes = []
        while True:
            try:
                ticket, value, error = self._done.get_nowait()
            except queue.Empty:
                break
            outcomes.append(self._apply(session, ticket, value, error))
        return outcomes

    def _apply(self, session, ticket, value, error) -> IngestOutcome:
        live = (session is not None and session.is_open
                and session.generation == ticket.generation)
        if not live:
            log.info("Dropping upload %d for closed session %d", ticket.job_id, ticket.generation)
            return IngestOutcome(ticket, STALE)
        if error is not None:
            log.warning("Upload %d failed: %s", ticket.job_id, error)
            return IngestOutcome(ticket, FAILED, str(error))
        try:
            if ticket.target == PROFILE_TARGET:
                session.set_profile_image(value)
            else:
                session.set_work_image(ticket.target, value)
        except InvalidEditError as e:
            # the work was removed while the file was being read
            log.info("Dropping upload %d: %s", ticket.job_id, e)
            return IngestOutcome(ticket, STALE, str(e))
        return IngestOutcome(ticket, APPLIED)
