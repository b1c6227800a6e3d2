"""Tests for wallet request builders and the JSON-RPC wallet client."""

import json

import httpx
import pytest

from storefront.services.wallet import (
    HttpWalletProvider,
    WalletProviderError,
    build_data_request,
    build_transfer_request,
    encode_transfer,
    format_address,
    format_name,
    number_to_hex,
    parse_units,
)

RECIPIENT = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"


class TestUnits:
    def test_chain_id_hex(self):
        assert number_to_hex(8453) == "0x2105"

    def test_whole_amount(self):
        assert parse_units(75.0, 6) == 75_000_000

    def test_fractional_amount(self):
        assert parse_units(19.99, 6) == 19_990_000

    def test_float_noise_is_rounded_away(self):
        assert parse_units(0.1 + 0.2, 6) == 300_000

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            parse_units(-1, 6)


class TestEncodeTransfer:
    def test_layout(self):
        data = encode_transfer(RECIPIENT, 75_000_000)

        assert data.startswith("0xa9059cbb")
        assert len(data) == 2 + 8 + 64 + 64
        assert data[10:74] == "0" * 24 + RECIPIENT[2:]
        assert int(data[74:], 16) == 75_000_000

    def test_checksummed_address_is_lowercased(self):
        data = encode_transfer("0xD8DA6BF26964AF9D7EED9E03E53415D37AA96045", 1)
        assert data[10:74].endswith(RECIPIENT[2:])

    def test_invalid_address_rejected(self):
        with pytest.raises(ValueError):
            encode_transfer("0x1234", 1)


class TestRequestBuilders:
    def test_transfer_request(self):
        params = build_transfer_request(75.0, chain_id=8453, token_address=USDC, recipient=RECIPIENT, decimals=6)

        assert len(params) == 1
        assert params[0]["version"] == "1.0"
        assert params[0]["chainId"] == "0x2105"
        call = params[0]["calls"][0]
        assert call["to"] == USDC
        assert call["data"] == encode_transfer(RECIPIENT, 75_000_000)

    def test_data_request_with_both_flags(self):
        params = build_data_request(True, True, chain_id=8453, callback_url="https://cb.test")

        assert params[0]["calls"] == []
        callback = params[0]["capabilities"]["dataCallback"]
        assert callback["callbackURL"] == "https://cb.test"
        assert callback["requests"] == [
            {"type": "email", "optional": False},
            {"type": "physicalAddress", "optional": False},
        ]

    def test_data_request_email_only(self):
        params = build_data_request(True, False, chain_id=8453, callback_url="https://cb.test")
        assert params[0]["capabilities"]["dataCallback"]["requests"] == [{"type": "email", "optional": False}]

    def test_no_data_request_when_flags_off(self):
        assert build_data_request(False, False, chain_id=8453, callback_url="https://cb.test") is None


class TestContactFormatting:
    def test_address_skips_empty_parts(self):
        address = {
            "address1": "1 Main St",
            "address2": "",
            "city": "Lisbon",
            "state": None,
            "postalCode": "1000-001",
            "countryCode": "PT",
        }
        assert format_address(address) == "1 Main St, Lisbon, 1000-001, PT"

    def test_name_is_family_then_first(self):
        assert format_name({"familyName": "Doe", "firstName": "Jane"}) == "Doe Jane"

    def test_name_with_missing_part_is_trimmed(self):
        assert format_name({"firstName": "Jane"}) == "Jane"


def _transport(handler):
    return httpx.MockTransport(handler)


class TestHttpWalletProvider:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"hash": "0xabc"}})

        wallet = HttpWalletProvider("http://wallet.test/rpc", transport=_transport(handler))
        result = await wallet.request("wallet_sendCalls", [{"version": "1.0"}])

        assert result == {"hash": "0xabc"}
        assert seen["method"] == "wallet_sendCalls"
        assert seen["params"] == [{"version": "1.0"}]
        assert seen["jsonrpc"] == "2.0"

    @pytest.mark.asyncio
    async def test_rpc_error_raises(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": 4001, "message": "User rejected"}})

        wallet = HttpWalletProvider("http://wallet.test/rpc", transport=_transport(handler))
        with pytest.raises(WalletProviderError, match="User rejected"):
            await wallet.request("wallet_sendCalls", [])

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        wallet = HttpWalletProvider("http://wallet.test/rpc", transport=_transport(handler))
        with pytest.raises(WalletProviderError, match="502"):
            await wallet.request("wallet_sendCalls", [])

    @pytest.mark.asyncio
    async def test_request_ids_increase(self):
        ids = []

        def handler(request):
            ids.append(json.loads(request.content)["id"])
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": ids[-1], "result": None})

        wallet = HttpWalletProvider("http://wallet.test/rpc", transport=_transport(handler))
        await wallet.request("wallet_sendCalls", [])
        await wallet.request("wallet_sendCalls", [])
        assert ids == [1, 2]
