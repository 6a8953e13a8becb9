"""
Transfer dispatcher: ships a canvas snapshot to an external collaborator
and publishes the returned text into the application context.

Every failure mode (network, non-2xx, malformed JSON, schema mismatch,
success=false) ends as Err(reason) plus an error notification. Nothing
here raises to the caller, and destination state is only touched on success.
"""
import logging
import threading
import time
import uuid
from typing import Dict, Literal, Optional, Type
import requests
from pydantic import BaseModel, ValidationError
from .context import AppContext
from .destinations import ChatMessage, GraphEntry
from .results import (
    AnalysisResponse,
    EquationResponse,
    Err,
    GraphResponse,
    Ok,
    Result,
    parse_equations,
)
from ..canvas.snapshot import Snapshot
from ..config import ANALYSIS_PROMPT

logger = logging.getLogger("transfer")

Destination = Literal["analysis", "equations"]
TransferState = Literal["idle", "sending", "succeeded", "failed"]

SHARED_DRAWING_MESSAGE = "I've shared my canvas drawing for analysis. Please analyze what I've drawn."


class Transfer(BaseModel):
    id: str
    destination: Destination
    state: TransferState = "idle"
    reason: Optional[str] = None
    created_at: float
    finished_at: Optional[float] = None


class TransferDispatcher:
    def __init__(self, context: AppContext, http: Optional[requests.Session] = None):
        self.context = context
        self.http = http or requests.Session()
        self._transfers: Dict[str, Transfer] = {}
        self._lock = threading.Lock()

    # ============================================================================
    # Records
    # ============================================================================

    def _new_record(self, destination: Destination) -> Transfer:
        record = Transfer(id=str(uuid.uuid4()), destination=destination, created_at=time.time())
        with self._lock:
            self._transfers[record.id] = record
            self._evict()
        return record

    def _evict(self) -> None:
        # Oldest settled records go first; in-flight ones are never dropped
        excess = len(self._transfers) - self.context.settings.transfer_history
        if excess <= 0:
            return
        settled = [tid for tid, r in self._transfers.items() if r.finished_at is not None]
        for transfer_id in settled[:excess]:
            del self._transfers[transfer_id]

    def get(self, transfer_id: str) -> Optional[Transfer]:
        with self._lock:
            return self._transfers.get(transfer_id)

    # ============================================================================
    # Entry points
    # ============================================================================

    def transfer(self, snapshot: Snapshot, destination: Destination, record: Optional[Transfer] = None) -> Result:
        record = record or self._new_record(destination)
        record.state = "sending"
        logger.info("Transfer %s -> %s (%d bytes)", record.id, destination, len(snapshot.data))

        progress_text = "Transferring canvas to chat..." if destination == "analysis" else "Extracting equations..."
        with self.context.lock:
            pending = self.context.notifications.push("info", progress_text, ttl=None)

        try:
            if destination == "analysis":
                result = self._send_analysis(snapshot)
            elif destination == "equations":
                result = self._send_equations(snapshot)
            else:
                result = Err(reason=f"Unknown destination: {destination}")
        finally:
            with self.context.lock:
                self.context.notifications.dismiss(pending.id)

        record.state = "succeeded" if result.ok else "failed"
        record.reason = None if result.ok else result.reason
        record.finished_at = time.time()
        if not result.ok:
            logger.warning("Transfer %s failed: %s", record.id, result.reason)
        return result

    def dispatch_async(self, snapshot: Snapshot, destination: Destination) -> Transfer:
        """Fire-and-forget: returns the record immediately, poll it with get()."""
        record = self._new_record(destination)
        record.state = "sending"
        t = threading.Thread(target=self.transfer, args=(snapshot, destination, record), daemon=True)
        t.start()
        return record

    def convert_to_graph(self, equation: str) -> Result:
        with self.context.lock:
            pending = self.context.notifications.push("info", "Converting to graph...", ttl=None)
        try:
            result = self._validated(self.context.settings.graph_url, {"equation": equation}, GraphResponse)
        finally:
            with self.context.lock:
                self.context.notifications.dismiss(pending.id)

        if result.ok and (not result.value.success or not result.value.geogebraEquation):
            result = Err(reason=result.value.error or "Equation cannot be graphed")

        with self.context.lock:
            if not result.ok:
                logger.warning("Graph conversion failed for %r: %s", equation, result.reason)
                self.context.notifications.push("error", "Cannot convert this equation to graph")
                return result
            entry = GraphEntry(equation=equation, graph_equation=result.value.geogebraEquation.strip())
            self.context.graphs.append(entry)
            self.context.active_tab = "graphs"
            self.context.notifications.push("success", "Graph created successfully!")
        return Ok(value=entry)

    # ============================================================================
    # Destinations
    # ============================================================================

    def _send_analysis(self, snapshot: Snapshot) -> Result:
        payload = {"imageData": snapshot.data, "prompt": ANALYSIS_PROMPT}
        result = self._validated(self.context.settings.analyze_url, payload, AnalysisResponse)
        if result.ok and not result.value.success:
            result = Err(reason=result.value.error or "Analysis failed")

        with self.context.lock:
            if not result.ok:
                self.context.notifications.push("error", "Failed to analyze canvas")
                return result
            analysis = result.value.analysis or ""
            # An empty analysis still counts as success, the transcript is just left alone
            if analysis:
                self.context.chat.append(ChatMessage(role="user", content=SHARED_DRAWING_MESSAGE, image_data=snapshot.data))
                self.context.chat.append(ChatMessage(role="model", content=f"**Canvas Analysis:**\n\n{analysis}"))
            self.context.active_tab = "chat"
            self.context.notifications.push("success", "Canvas analysis ready in chat!")
        return Ok(value=analysis)

    def _send_equations(self, snapshot: Snapshot) -> Result:
        result = self._validated(self.context.settings.equations_url, {"imageData": snapshot.data}, EquationResponse)
        if result.ok and not result.value.success:
            result = Err(reason=result.value.error or "Equation extraction failed")

        with self.context.lock:
            if not result.ok:
                self.context.notifications.push("error", "Error extracting equations")
                return result
            equations = parse_equations(result.value.equations)
            if not equations:
                # Valid negative answer, not a failure
                self.context.notifications.push("info", "No equations found in drawing")
                return Ok(value=[])
            self.context.equations.replace(equations)
            self.context.active_tab = "equations"
            self.context.notifications.push("success", f"Found {len(equations)} equation(s)!")
        return Ok(value=equations)

    # ============================================================================
    # HTTP
    # ============================================================================

    def _validated(self, url: str, payload: dict, schema: Type[BaseModel]) -> Result:
        try:
            response = self.http.post(url, json=payload, timeout=self.context.settings.transfer_timeout)
        except requests.RequestException as e:
            return Err(reason=f"Network error: {e}")

        if not 200 <= response.status_code < 300:
            return Err(reason=f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            return Err(reason="Malformed JSON response")

        try:
            return Ok(value=schema.model_validate(data))
        except ValidationError as e:
            return Err(reason=f"Unexpected response shape: {e.error_count()} error(s)")
