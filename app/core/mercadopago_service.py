# app/core/mercadopago_service.py

import logging
from typing import Dict, List, Optional

import requests

from app.config import settings
from app.core.exceptions import PaymentGatewayError
from app.schemas.pago import PreferenciaResponse

logger = logging.getLogger(__name__)


# Dependencia para que los routers puedan inyectar el servicio
def get_mercadopago_service():
    return MercadoPagoService()


class MercadoPagoService:
    def __init__(self):
        self.base_url = settings.MP_API_URL
        self.access_token = settings.MP_ACCESS_TOKEN
        self.app_url = settings.APP_BASE_URL

    def back_urls(self, path: str, query: str) -> Dict[str, str]:
        return {
            estado: f"{self.app_url}{path}?status={estado}&{query}"
            for estado in ("success", "failure", "pending")
        }

    def create_preference(
        self,
        items: List[dict],
        external_reference: str,
        back_urls: Dict[str, str],
        payer_name: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> PreferenciaResponse:
        """
        Crea una preferencia de Checkout Pro y devuelve la URL a la que
        se redirige al usuario para pagar con tarjeta.
        """
        if not self.access_token:
            raise PaymentGatewayError("Mercado Pago no está configurado")

        endpoint = "/checkout/preferences"
        payload = {
            "items": items,
            "back_urls": back_urls,
            "auto_return": "approved",
            "external_reference": external_reference,
            "notification_url": f"{self.app_url}/pagos/webhook",
            "metadata": metadata or {},
        }
        if payer_name:
            payload["payer"] = {"name": payer_name}

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(self.base_url + endpoint, json=payload, headers=headers, timeout=15)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Error al crear preferencia para {external_reference}: {e}")
            raise PaymentGatewayError(f"Error al crear la preferencia de pago: {e}")

        if not data.get("id") or not data.get("init_point"):
            raise PaymentGatewayError("Respuesta de Mercado Pago incompleta o inesperada.")

        logger.info(f"💳 Preferencia {data['id']} creada para {external_reference}")
        return PreferenciaResponse(
            preference_id=str(data["id"]),
            init_point=data["init_point"],
            sandbox_init_point=data.get("sandbox_init_point"),
        )
