"""
Tests for request validation on create and update.

Every violated constraint is reported in a single 400 response, one
violation entry per field, and nothing is persisted.
"""

import pytest


def _fields(response) -> set[str]:
    return {v["field"] for v in response.json()["violations"]}


class TestCreateValidation:

    async def test_empty_body_reports_all_required_fields(self, client, customer_a):
        response = await client.post("/accounts", json={}, headers=customer_a)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert {"accountType", "currency", "initialDeposit", "customerDetails"} <= _fields(
            response
        )

    async def test_multiple_violations_reported_together(
        self, client, customer_a, make_payload
    ):
        payload = make_payload(currency="usd", initialDeposit=-5)
        payload["customerDetails"]["email"] = "not-an-email"

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        assert {
            "currency",
            "initialDeposit",
            "customerDetails.email",
        } <= _fields(response)

    @pytest.mark.parametrize("currency", ["usd", "US", "USDX", "U5D"])
    async def test_invalid_currency(self, client, customer_a, make_payload, currency):
        response = await client.post(
            "/accounts", json=make_payload(currency=currency), headers=customer_a
        )
        assert response.status_code == 400
        violation = response.json()["violations"][0]
        assert violation["field"] == "currency"
        assert "ISO 4217" in violation["message"]

    async def test_unknown_account_type(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(accountType="PIGGY_BANK"), headers=customer_a
        )
        assert response.status_code == 400
        assert "accountType" in _fields(response)

    async def test_negative_deposit(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(initialDeposit=-0.01), headers=customer_a
        )
        assert response.status_code == 400
        assert _fields(response) == {"initialDeposit"}

    async def test_deposit_with_too_many_decimals(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(initialDeposit="10.001"), headers=customer_a
        )
        assert response.status_code == 400
        assert "initialDeposit" in _fields(response)

    async def test_blank_first_name(self, client, customer_a, make_payload):
        payload = make_payload()
        payload["customerDetails"]["firstName"] = "   "

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        violation = response.json()["violations"][0]
        assert violation["field"] == "customerDetails.firstName"
        assert "First name is required" in violation["message"]

    async def test_missing_last_name(self, client, customer_a, make_payload):
        payload = make_payload()
        del payload["customerDetails"]["lastName"]

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        assert "customerDetails.lastName" in _fields(response)

    async def test_invalid_email(self, client, customer_a, make_payload):
        payload = make_payload()
        payload["customerDetails"]["email"] = "jane.example.com"

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        assert "Invalid email format" in response.json()["violations"][0]["message"]

    @pytest.mark.parametrize("phone", ["0123456789", "phone", "+1234567890123456"])
    async def test_invalid_phone(self, client, customer_a, make_payload, phone):
        payload = make_payload()
        payload["customerDetails"]["phoneNumber"] = phone

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        assert _fields(response) == {"customerDetails.phoneNumber"}

    async def test_nickname_invalid_characters(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(accountNickname="Fund <script>"), headers=customer_a
        )
        assert response.status_code == 400
        assert _fields(response) == {"accountNickname"}

    async def test_nickname_too_long(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(accountNickname="a" * 51), headers=customer_a
        )
        assert response.status_code == 400
        assert _fields(response) == {"accountNickname"}

    async def test_branch_id_too_long(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(branchId="BRANCH-00001"), headers=customer_a
        )
        assert response.status_code == 400
        assert _fields(response) == {"branchId"}

    async def test_metadata_value_too_long(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(metadata={"note": "x" * 501}), headers=customer_a
        )
        assert response.status_code == 400
        assert "metadata" in _fields(response)

    async def test_metadata_empty_key(self, client, customer_a, make_payload):
        response = await client.post(
            "/accounts", json=make_payload(metadata={"": "value"}), headers=customer_a
        )
        assert response.status_code == 400

    async def test_rejected_create_persists_nothing(self, client, customer_a, make_payload):
        await client.post("/accounts", json=make_payload(currency="xx"), headers=customer_a)

        data = (await client.get("/accounts", headers=customer_a)).json()
        assert data["totalElements"] == 0

    async def test_snake_case_fields_accepted(self, client, customer_a):
        payload = {
            "account_type": "CHECKING",
            "currency": "GBP",
            "initial_deposit": "25.50",
            "customer_details": {"first_name": "Sam", "last_name": "Lee"},
        }
        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 201
        assert response.json()["balance"]["amount"] == "25.50"


class TestUpdateValidation:

    async def test_invalid_nickname_rejected(self, client, customer_a, create_account):
        account = await create_account(customer_a)

        response = await client.put(
            f"/accounts/{account['accountId']}",
            json={"accountNickname": "bad|name"},
            headers=customer_a,
        )
        assert response.status_code == 400
        assert _fields(response) == {"accountNickname"}

        unchanged = await client.get(f"/accounts/{account['accountId']}", headers=customer_a)
        assert unchanged.json()["accountNickname"] == "Rainy Day Fund"

    async def test_invalid_metadata_rejected(self, client, customer_a, create_account):
        account = await create_account(customer_a)

        response = await client.put(
            f"/accounts/{account['accountId']}",
            json={"metadata": {"k" * 101: "v"}},
            headers=customer_a,
        )
        assert response.status_code == 400
        assert _fields(response) == {"metadata"}

    async def test_close_reason_too_long(self, client, customer_a, create_account):
        account = await create_account(customer_a, initialDeposit=0)

        response = await client.delete(
            f"/accounts/{account['accountId']}",
            params={"reason": "r" * 101},
            headers=customer_a,
        )
        assert response.status_code == 400
        assert _fields(response) == {"reason"}


class TestWholeValueMatching:
    """Patterns must match the entire value, not a prefix of it."""

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"currency": "USD\n"}, "currency"),
            ({"currency": "USDX"}, "currency"),
        ],
    )
    async def test_top_level_trailing_characters(
        self, client, customer_a, make_payload, overrides, field
    ):
        response = await client.post(
            "/accounts", json=make_payload(**overrides), headers=customer_a
        )
        assert response.status_code == 400
        assert _fields(response) == {field}

    @pytest.mark.parametrize(
        ("detail", "value"),
        [
            ("email", "jane.doe@example.com\n"),
            ("phoneNumber", "+15551234567\n"),
            ("phoneNumber", "+15551234567x"),
        ],
    )
    async def test_contact_trailing_characters(
        self, client, customer_a, make_payload, detail, value
    ):
        payload = make_payload()
        payload["customerDetails"][detail] = value

        response = await client.post("/accounts", json=payload, headers=customer_a)
        assert response.status_code == 400
        assert _fields(response) == {f"customerDetails.{detail}"}

    async def test_stored_currency_is_filterable(self, client, customer_a, create_account):
        await create_account(customer_a, currency="USD")

        data = (await client.get("/accounts?currency=USD", headers=customer_a)).json()
        assert data["totalElements"] == 1
        assert data["accounts"][0]["currency"] == "USD"
