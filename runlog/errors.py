# runlog/errors.py
"""
Errores de dominio.

Todas las operaciones de los gateways (auth, store) y del cálculo de ritmo
fallan con una subclase de RunlogError. Cada error lleva un `code` estable
(para la API JSON) y un `message` legible (para la UI).
"""


class RunlogError(Exception):
    status_code = 400
    default_message = "Error inesperado."
    # code -> HTTP status (si no aparece, se usa status_code)
    statuses = {}

    def __init__(self, code: str, message: str = None, status_code: int = None):
        self.code = code
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        else:
            self.status_code = self.statuses.get(code, self.status_code)
        super().__init__(f"{code}: {self.message}")

    def to_dict(self) -> dict:
        return {"error_code": self.code, "message": self.message}


class AuthError(RunlogError):
    """Credenciales inválidas, cuenta sin confirmar, registro rechazado."""

    status_code = 401
    default_message = "Error de autenticación."
    statuses = {
        "invalid_email": 400,
        "weak_password": 400,
        "invalid_token": 400,
        "user_already_exists": 409,
    }


class StoreError(RunlogError):
    """Fallo del almacén de registros: sin sesión, prohibido, restricción, BD caída."""

    status_code = 500
    default_message = "No se pudo acceder a los registros."
    statuses = {
        "not_authenticated": 401,
        "forbidden": 403,
        "constraint_violation": 409,
        "store_unavailable": 503,
    }


class InvalidInput(RunlogError):
    """Distancia o duración mal formadas (el ritmo no se puede calcular)."""

    status_code = 400
    default_message = "Datos no válidos."

    def __init__(self, message: str = None, field: str = None, code: str = "invalid_input"):
        self.field = field
        super().__init__(code, message)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.field:
            d["field"] = self.field
        return d
