"""
Emitter — assembles the policy document and hands it to storage.

No validation happens here; inputs are sound by construction.
"""

import logging
from pathlib import Path

from .canon import render_canonical_json
from .contracts.errors import PolicyWriteError
from .contracts.schema import POLICY_SCHEMA, PolicyDocument

logger = logging.getLogger(__name__)


def build_policy_document(modules: dict[str, list[str]], source: str) -> PolicyDocument:
    """Wrap a canonical module mapping with the output schema tag and provenance."""
    return PolicyDocument(schema=POLICY_SCHEMA, source=source, modules=modules)


def render_policy_document(document: PolicyDocument) -> bytes:
    """Serialised bytes exactly as written to disk."""
    return render_canonical_json(document.to_json_dict()).encode("utf-8")


def write_policy_document(document: PolicyDocument, destination: str | Path) -> Path:
    """
    Write the policy document, creating parent directories as needed.

    Raises:
        PolicyWriteError: destination cannot be created or written

    Returns:
        The destination path.
    """
    path = Path(destination)
    payload = render_policy_document(document)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as e:
        raise PolicyWriteError(f"cannot write policy file {path}: {e.strerror or e}") from e
    logger.debug("Policy document written", extra={"path": str(path), "bytes": len(payload)})
    return path
