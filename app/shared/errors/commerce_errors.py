# -*- coding: utf-8 -*-
"""
backend/app/shared/errors/commerce_errors.py

Excepciones de dominio del flujo checkout → pago → descarga.

No dependen de FastAPI: los servicios las lanzan y
`app.shared.errors.handlers` las traduce a respuestas JSON con
un error_code estable para la UI.

Autor: Anne Creations
Fecha: 2026-03-03
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CommerceError(Exception):
    """Base de todas las excepciones de dominio."""

    error_code: str = "commerce_error"
    http_status: int = 400

    def __init__(self, message: str, *, error_code: Optional[str] = None, **context: Any):
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context: Dict[str, Any] = context
        super().__init__(message)

    def to_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"error_code": self.error_code, "message": self.message}
        detail.update({k: v for k, v in self.context.items() if v is not None})
        return detail


class ValidationError(CommerceError):
    """Entrada ausente o mal formada (carrito vacío, estado desconocido...)."""
    error_code = "validation_error"
    http_status = 400


class NotFoundError(CommerceError):
    """Recurso inexistente o ajeno al cliente (no se distingue un caso del otro)."""
    error_code = "not_found"
    http_status = 404


class ConflictError(CommerceError):
    """Conflicto con el estado actual (producto ya comprado, código duplicado)."""
    error_code = "conflict"
    http_status = 409


class IneligibleCouponError(CommerceError):
    """Cupón aplicado manualmente que no cumple alguna regla de elegibilidad."""
    error_code = "ineligible_coupon"
    http_status = 422

    def __init__(self, kind: str, message: str, **context: Any):
        self.kind = kind
        super().__init__(message, kind=kind, **context)


class IllegalTransitionError(CommerceError):
    """Transición no permitida por la máquina de estados de la orden."""
    error_code = "illegal_transition"
    http_status = 409

    def __init__(self, from_status: str, to_status: str, message: Optional[str] = None):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            message or f"Illegal order status transition: {from_status} -> {to_status}",
            from_status=from_status,
            to_status=to_status,
        )


class SignatureMismatchError(CommerceError):
    """La firma del gateway no coincide; la orden no avanza."""
    error_code = "signature_mismatch"
    http_status = 400

    def __init__(self, message: str = "Payment signature verification failed"):
        super().__init__(message)


class AuthorizationFailure(CommerceError):
    """
    Fallo opaco de autorización de descarga.

    El mensaje es siempre el mismo: no revela si la orden, el producto
    o la propiedad fueron lo que falló.
    """
    error_code = "authorization_failed"
    http_status = 403
    PUBLIC_MESSAGE = "Could not verify this purchase"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.PUBLIC_MESSAGE)


class StorageMissingError(CommerceError):
    """El claim es válido pero el archivo no existe en el storage."""
    error_code = "file_missing"
    http_status = 404

    def __init__(self, message: str = "File missing on server"):
        super().__init__(message)


class PaymentGatewayError(CommerceError):
    """Error de transporte, timeout o respuesta no exitosa del gateway."""
    error_code = "payment_gateway_error"
    http_status = 502


__all__ = [
    "CommerceError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "IneligibleCouponError",
    "IllegalTransitionError",
    "SignatureMismatchError",
    "AuthorizationFailure",
    "StorageMissingError",
    "PaymentGatewayError",
]

# Fin del archivo backend/app/shared/errors/commerce_errors.py
