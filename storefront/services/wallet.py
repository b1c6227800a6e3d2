import httpx
import itertools
import logging
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SEND_CALLS_METHOD = "wallet_sendCalls"
SEND_CALLS_VERSION = "1.0"

# keccak256("transfer(address,uint256)")[:4]
ERC20_TRANSFER_SELECTOR = "a9059cbb"

ADDRESS_FIELDS = ["address1", "address2", "city", "state", "postalCode", "countryCode"]


class WalletProviderError(Exception):
    """Raised when the wallet provider rejects or fails a request"""


class WalletProvider(ABC):
    """Capability-based request API exposed by the buyer's wallet."""

    @abstractmethod
    async def request(self, method: str, params: List[Dict[str, Any]]) -> Any:
        ...


class HttpWalletProvider(WalletProvider):
    """Forwards wallet requests as JSON-RPC 2.0 calls over HTTP.

    A single attempt per request. The client is created without a timeout,
    so a wallet that never answers keeps the checkout waiting.
    """

    def __init__(self, rpc_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.rpc_url = rpc_url
        self.transport = transport
        self._ids = itertools.count(1)

    async def request(self, method: str, params: List[Dict[str, Any]]) -> Any:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        try:
            async with httpx.AsyncClient(timeout=None, transport=self.transport) as client:
                response = await client.post(self.rpc_url, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Wallet] {method} rejected with HTTP {e.response.status_code}: {e.response.text}")
            raise WalletProviderError(f"Wallet request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"[Wallet] {method} failed: {str(e)}")
            raise WalletProviderError(f"Wallet request failed: {str(e)}") from e

        payload = response.json()
        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(f"[Wallet] {method} returned error: {message}")
            raise WalletProviderError(message or "Wallet request rejected")

        return payload.get("result")


def number_to_hex(value: int) -> str:
    return hex(value)


def parse_units(amount: Any, decimals: int) -> int:
    """Convert a decimal token amount into integer base units."""
    value = Decimal(str(amount))
    if value < 0:
        raise ValueError(f"Amount must not be negative: {amount}")
    quantum = Decimal(1).scaleb(-decimals)
    return int(value.quantize(quantum, rounding=ROUND_HALF_UP).scaleb(decimals))


def _pad_word(hex_value: str) -> str:
    return hex_value.rjust(64, "0")


def encode_transfer(recipient: str, amount_units: int) -> str:
    """ABI-encode an ERC-20 transfer(recipient, amount) call."""
    address = recipient.lower()
    if address.startswith("0x"):
        address = address[2:]
    if len(address) != 40 or any(c not in "0123456789abcdef" for c in address):
        raise ValueError(f"Invalid recipient address: {recipient}")
    if amount_units < 0 or amount_units >= 2 ** 256:
        raise ValueError(f"Amount out of uint256 range: {amount_units}")

    return "0x" + ERC20_TRANSFER_SELECTOR + _pad_word(address) + _pad_word(format(amount_units, "x"))


def build_transfer_request(
    total: float,
    chain_id: int,
    token_address: str,
    recipient: str,
    decimals: int,
) -> List[Dict[str, Any]]:
    return [
        {
            "version": SEND_CALLS_VERSION,
            "chainId": number_to_hex(chain_id),
            "calls": [
                {
                    "to": token_address,
                    "data": encode_transfer(recipient, parse_units(total, decimals)),
                }
            ],
        }
    ]


def build_data_request(
    request_email: bool,
    request_address: bool,
    chain_id: int,
    callback_url: str,
) -> Optional[List[Dict[str, Any]]]:
    """Build a data-only request; None when nothing was asked for."""
    requests = []
    if request_email:
        requests.append({"type": "email", "optional": False})
    if request_address:
        requests.append({"type": "physicalAddress", "optional": False})

    if not requests:
        return None

    return [
        {
            "version": SEND_CALLS_VERSION,
            "chainId": number_to_hex(chain_id),
            "calls": [],
            "capabilities": {
                "dataCallback": {
                    "requests": requests,
                    "callbackURL": callback_url,
                }
            },
        }
    ]


def format_address(physical_address: Dict[str, Any]) -> str:
    parts = [physical_address.get(field) for field in ADDRESS_FIELDS]
    return ", ".join(str(part) for part in parts if part)


def format_name(name: Dict[str, Any]) -> str:
    return f"{name.get('familyName') or ''} {name.get('firstName') or ''}".strip()
