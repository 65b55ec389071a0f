"""
Re-signing of Slack requests handed from the front door to the worker.

The front door has already parsed the request body, so the worker receives a
re-serialized payload. Slack's signature covers the raw body, which means the
signature has to be recomputed over the exact string that is forwarded:
`payload=` + URI-encoded compact JSON, signed as `v0:<timestamp>:<body>`.
The worker then verifies it with the same slack_sdk check the front door
uses.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Mapping, MutableMapping, Optional
from urllib.parse import parse_qs, quote

from slack_sdk.signature import SignatureVerifier

from app.schemas.standup import WorkerInvocation

logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"
PAYLOAD_PREFIX = "payload="
SIGNATURE_VERSION = "v0"

# Characters left unescaped by JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"


def get_header_value(headers: Mapping[str, str], key: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    wanted = key.lower()
    for name, value in headers.items():
        if name.lower() == wanted:
            return value
    return None


def replace_header_value(
    headers: MutableMapping[str, str], key: str, value: str
) -> None:
    """Overwrite an existing header, keeping its casing. Absent keys stay absent."""
    wanted = key.lower()
    for name in list(headers):
        if name.lower() == wanted:
            headers[name] = value
            return


def create_payload_string(body: Any) -> str:
    """`payload=` + URI-encoded compact JSON of `body`."""
    serialized = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    return PAYLOAD_PREFIX + quote(serialized, safe=URI_COMPONENT_SAFE)


def parse_payload_body(raw_body: str) -> dict[str, Any]:
    """
    Decode an interaction body (`payload=<urlencoded json>`).

    Raises ValueError when there is no payload field or it is not a JSON object.
    """
    fields = parse_qs(raw_body, keep_blank_values=True)
    if "payload" not in fields:
        raise ValueError("Request body has no payload field")
    payload = json.loads(fields["payload"][0])
    if not isinstance(payload, dict):
        raise ValueError("Payload is not a JSON object")
    return payload


class DelegationSigner:
    """Signs forwarded requests and verifies them on the receiving side."""

    def __init__(self, signing_secret: str) -> None:
        if not signing_secret:
            raise ValueError("A signing secret is required for delegation")
        self.signing_secret = signing_secret
        self._verifier = SignatureVerifier(signing_secret=signing_secret)

    def compute_signature(self, timestamp: str, payload: str) -> str:
        base = f"{SIGNATURE_VERSION}:{timestamp}:{payload}"
        digest = hmac.new(
            self.signing_secret.encode("utf-8"),
            base.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return f"{SIGNATURE_VERSION}={digest}"

    def resign(
        self,
        headers: MutableMapping[str, str],
        payload: str,
        timestamp: Optional[int] = None,
    ) -> MutableMapping[str, str]:
        """
        Refresh the timestamp and signature headers in place for `payload`.

        Only headers already present are replaced; a request that arrived
        without them stays unsigned and fails verification downstream.
        """
        ts = str(timestamp if timestamp is not None else int(time.time()))
        replace_header_value(headers, TIMESTAMP_HEADER, ts)
        current_ts = get_header_value(headers, TIMESTAMP_HEADER) or ts
        replace_header_value(
            headers, SIGNATURE_HEADER, self.compute_signature(current_ts, payload)
        )
        return headers

    def verify(self, headers: Mapping[str, str], body: str) -> bool:
        """Slack's own check: signature match and a timestamp within five minutes."""
        return self._verifier.is_valid(
            body=body,
            timestamp=get_header_value(headers, TIMESTAMP_HEADER),
            signature=get_header_value(headers, SIGNATURE_HEADER),
        )

    def build_worker_invocation(
        self, body: Any, headers: Mapping[str, str]
    ) -> WorkerInvocation:
        """Serialize `body`, re-sign a copy of `headers` and wrap both."""
        forwarded = dict(headers)
        payload = create_payload_string(body)
        self.resign(forwarded, payload)
        return WorkerInvocation(body=payload, headers=forwarded)


def delegate_to_worker(
    signer: DelegationSigner, body: dict[str, Any], headers: Mapping[str, str]
) -> WorkerInvocation:
    """Fire-and-forget hand-off of a parsed interaction to the Celery worker."""
    # Imported here so the signer stays usable without a broker configured
    from app.tasks.worker_event_task import process_worker_event_task

    invocation = signer.build_worker_invocation(body, headers)
    process_worker_event_task.delay(invocation.model_dump())
    logger.info("Delegated %s to worker", body.get("type", "request"))
    return invocation
