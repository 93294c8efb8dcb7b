# app/core/exceptions.py

from fastapi import HTTPException, status

class AuthException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "No tiene permisos para realizar esta acción"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Recurso no encontrado"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ConflictException(HTTPException):
    def __init__(self, detail: str = "El recurso ya está en uso"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class BadRequestException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

# =======================================================
# 💳 EXCEPCIÓN PARA LA PASARELA DE PAGOS
# =======================================================
class PaymentGatewayError(Exception):
    """
    Excepción personalizada para manejar errores al comunicarse
    con la pasarela de pagos (Mercado Pago).
    """
    def __init__(self, message: str = "Error al comunicarse con la pasarela de pago"):
        self.message = message
        super().__init__(self.message)
