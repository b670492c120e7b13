from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator

from xlbf.bf_interpreter import BrainfuckInterpreter, StepLimitExceeded
from xlbf.errors import AccessViolation, BrainfuckError, BrainfuckSyntaxError
from xlbf.tape import CellType
from xlbf.translator import CTranslator, TranslationResult

from .session import SessionRecord, SessionStore

logger = logging.getLogger(__name__)

# Requests without their own budget stop after this many instructions.
DEFAULT_MAX_STEPS = 10_000_000


def _string_to_input_bytes(data: str) -> List[int]:
    return [ord(ch) for ch in data]


def _validate_cell_type(value: str) -> str:
    normalized = value.lower()
    if normalized not in {cell_type.value for cell_type in CellType}:
        choices = ", ".join(cell_type.value for cell_type in CellType)
        raise ValueError(f"cell_type must be one of: {choices}")
    return normalized


class SessionConfiguration(BaseModel):
    tape_size: int = Field(default=1024, ge=1, le=1_000_000)
    cell_type: str = CellType.INT32.value

    @field_validator("cell_type")
    @classmethod
    def validate_cell_type(cls, value: str) -> str:
        return _validate_cell_type(value)


class SessionPayload(BaseModel):
    session_id: str
    tape_size: int
    cell_type: str
    pointer: int
    tape_start: int
    tape: List[int]


class InterpretRequest(BaseModel):
    code: str
    input: str = ""
    max_steps: Optional[int] = Field(default=None, ge=1)
    tape_window: int = Field(default=10, ge=0)


class EngineErrorPayload(BaseModel):
    kind: str
    message: str
    position: Optional[int] = None
    access: Optional[str] = None
    address: Optional[int] = None


class InterpretResponse(BaseModel):
    output: str
    status: str
    error: Optional[EngineErrorPayload] = None
    session: SessionPayload


class SessionTranslateRequest(BaseModel):
    code: str


class TranslateRequest(SessionConfiguration):
    code: str


class TranslationPayload(BaseModel):
    source: str
    depth: int
    balanced: bool
    cell_type_name: str


def _error_payload(exc: BrainfuckError) -> EngineErrorPayload:
    if isinstance(exc, AccessViolation):
        return EngineErrorPayload(
            kind="access_violation",
            message=str(exc),
            position=exc.position,
            access=exc.access.value,
            address=exc.address,
        )
    return EngineErrorPayload(kind="syntax_error", message=str(exc), position=exc.position)


def _translation_payload(result: TranslationResult, cell_type_name: str) -> TranslationPayload:
    return TranslationPayload(
        source=result.source,
        depth=result.depth,
        balanced=result.balanced,
        cell_type_name=cell_type_name,
    )


def create_app(
    store: Optional[SessionStore] = None,
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> FastAPI:
    session_store = store or SessionStore()
    app = FastAPI(title="XL Brainfuck API", version="0.1.0")

    def _get_record(session_id: str) -> SessionRecord:
        try:
            return session_store.get(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    def _build_payload(record: SessionRecord, tape_window: int = 10) -> SessionPayload:
        interpreter: BrainfuckInterpreter = record.interpreter
        start, cells = interpreter.tape.window(tape_window)
        return SessionPayload(
            session_id=record.session_id,
            tape_size=interpreter.tape.size,
            cell_type=interpreter.cell_type.value,
            pointer=interpreter.pointer,
            tape_start=start,
            tape=cells,
        )

    @app.post("/api/session", response_model=SessionPayload, status_code=status.HTTP_201_CREATED)
    def create_session(payload: SessionConfiguration) -> SessionPayload:
        record = session_store.create_session(
            tape_size=payload.tape_size,
            cell_type=CellType(payload.cell_type),
        )
        return _build_payload(record)

    @app.get("/api/session/{session_id}", response_model=SessionPayload)
    def get_session(session_id: str) -> SessionPayload:
        return _build_payload(_get_record(session_id))

    @app.post("/api/session/{session_id}/interpret", response_model=InterpretResponse)
    def interpret(session_id: str, payload: InterpretRequest) -> InterpretResponse:
        record = _get_record(session_id)
        interpreter = record.interpreter
        error: Optional[EngineErrorPayload] = None
        run_status = "ok"
        with record.lock:
            try:
                interpreter.run(
                    payload.code,
                    input_data=_string_to_input_bytes(payload.input),
                    max_steps=payload.max_steps or max_steps,
                )
            except StepLimitExceeded as exc:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
            except (AccessViolation, BrainfuckSyntaxError) as exc:
                error = _error_payload(exc)
                run_status = error.kind
            output = interpreter.output
            session_payload = _build_payload(record, payload.tape_window)
        return InterpretResponse(
            output=output,
            status=run_status,
            error=error,
            session=session_payload,
        )

    @app.post("/api/session/{session_id}/reset", response_model=SessionPayload)
    def reset_session(session_id: str) -> SessionPayload:
        try:
            record = session_store.reset(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return _build_payload(record)

    @app.post("/api/session/{session_id}/translate", response_model=TranslationPayload)
    def translate_for_session(session_id: str, payload: SessionTranslateRequest) -> TranslationPayload:
        tape = _get_record(session_id).interpreter.tape
        cell_type_name = tape.cell_type.c_name
        translator = CTranslator(tape_size=tape.size, cell_type_name=cell_type_name)
        return _translation_payload(translator.translate_unchecked(payload.code), cell_type_name)

    @app.delete("/api/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_session(session_id: str) -> Response:
        removed = session_store.remove(session_id)
        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown session id: {session_id}",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/api/translate", response_model=TranslationPayload)
    def translate(payload: TranslateRequest) -> TranslationPayload:
        cell_type_name = CellType(payload.cell_type).c_name
        translator = CTranslator(tape_size=payload.tape_size, cell_type_name=cell_type_name)
        result = translator.translate_unchecked(payload.code)
        if not result.balanced:
            logger.debug("Translated program is unbalanced (depth %d)", result.depth)
        return _translation_payload(result, cell_type_name)

    return app


__all__ = ["create_app"]
