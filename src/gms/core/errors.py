from __future__ import annotations

from datetime import datetime, UTC
from uuid import uuid4

from gms.contracts import ForensicArtifact


class EngineIntegrityError(RuntimeError):
    def __init__(self, artifact: ForensicArtifact) -> None:
        super().__init__(artifact.message)
        self.artifact = artifact

    @property
    def error_code(self) -> str:
        return self.artifact.error_code


class ConfigurationError(EngineIntegrityError):
    """Required ratings or rules were missing when a play was requested."""


class MisuseError(EngineIntegrityError):
    """The caller drove the match or a drive outside its lifecycle."""


def build_forensic_artifact(
    engine_scope: str,
    error_code: str,
    message: str,
    state_snapshot: dict[str, object],
    context: dict[str, object],
    identifiers: dict[str, str],
    causal_fragment: list[str],
) -> ForensicArtifact:
    return ForensicArtifact(
        artifact_id=str(uuid4()),
        timestamp=datetime.now(UTC),
        engine_scope=engine_scope,
        error_code=error_code,
        message=message,
        state_snapshot=state_snapshot,
        context=context,
        identifiers=identifiers,
        causal_fragment=causal_fragment,
    )


def misuse_error(engine_scope: str, error_code: str, message: str, state_snapshot: dict[str, object]) -> MisuseError:
    return MisuseError(
        build_forensic_artifact(
            engine_scope=engine_scope,
            error_code=error_code,
            message=message,
            state_snapshot=state_snapshot,
            context={},
            identifiers={},
            causal_fragment=["caller_misuse"],
        )
    )
