from .auth import *
from .reservacion import *
from .pago import *
from .modificacion import *
from .grupo import *
from .paquete import *
from .entradas import *
from .reporte import *

__all__ = [
    # Auth
    "Token", "TokenData",

    # Reservación
    "PasajeroCreate", "PasajeroEdit", "PasajeroResponse",
    "ReservacionCreate", "ReservacionUpdate", "ReservacionResponse", "ReservacionAdminResponse",
    "EstadoUpdate", "ConfirmacionReserva", "ReporteReconciliacion",

    # Pago
    "PagoCreate", "PagoResponse", "PagoRegistrado", "PreferenciaRequest", "PreferenciaResponse", "WebhookData",

    # Modificación
    "AccesoReservacion", "ModificacionRequest", "ModificacionResponse",

    # Grupos
    "GrupoCreate", "GrupoUpdate", "GrupoResponse", "AsignarMiembros", "PasajeroElegible", "MiGrupoPasajero",

    # Paquetes
    "PaqueteCatalogo", "PaqueteReservaCreate", "PaqueteReservaUpdate", "PaqueteReservaResponse",
    "PagoPaqueteCreate", "ConsolidarRequest", "ReservaAgrupada",

    # Entradas
    "ItemEntrada", "OrdenCreate", "OrdenResponse", "OrdenCreada",

    # Reportes
    "ResumenFinanciero", "ResumenPaquetes",
]
