"""Erros do agendador.

Cada erro conhece o status HTTP e o corpo de resposta que gera; a tradução
acontece nos exception handlers registrados em ``barbershop.main``.
"""
from typing import Any, Dict, Optional


class SchedulingError(Exception):
    status_code = 400
    message = "Erro no agendamento"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class EntityReferenceError(SchedulingError):
    """Id bem formado que não corresponde a nenhum registro."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        return {"error": [{"field": self.field, "message": self.message}]}


class SlotConflictError(SchedulingError):
    message = "Horário não disponível para este barbeiro"

    def __init__(self, conflict_id: int, conflict_time: str):
        self.conflict_id = conflict_id
        self.conflict_time = conflict_time
        super().__init__()

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        return {
            "error": self.message,
            "conflictingAppointment": {"id": self.conflict_id, "time": self.conflict_time},
        }


class NotFoundError(SchedulingError):
    status_code = 404
    message = "Agendamento não encontrado"


class AlreadyCompletedError(SchedulingError):
    message = "Agendamento já foi concluído"


class InfrastructureError(SchedulingError):
    status_code = 500
    message = "Erro ao acessar o banco de dados"

    def to_payload(self, expose_details: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if expose_details and self.details:
            payload["details"] = self.details
        return payload
