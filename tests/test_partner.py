"""Unit tests for the partner client."""

import pytest

from paylink_payments import (
    ConfigurationError,
    EnvironmentRestrictionError,
    GatewayRequestError,
    InvalidArgumentError,
    PartnerClient,
)

from conftest import TOKEN, build_response

BASE = "https://restpilot.paylink.sa"


class TestPartnerAuthentication:

    def test_uses_partner_credentials(self, partner_client, session):
        session.request.return_value = build_response(200, [])

        partner_client.get_my_merchants()

        call_args = session.post.call_args
        assert call_args[0][0] == f"{BASE}/api/partner/auth"
        assert call_args[1]["json"] == {
            "profileNo": "PROFILE-1",
            "apiKey": "partner-key",
            "persistToken": False,
        }

    def test_credentials_required(self, session):
        with pytest.raises(ConfigurationError):
            PartnerClient.test(None, "key", session=session)

    def test_production_base_url(self, session):
        client = PartnerClient.production("P", "K", session=session, persist_token=True)

        assert client.config.api_base_url == "https://restapi.paylink.sa"
        assert client.config.authentication_body()["persistToken"] is True


class TestMerchantLookup:

    def test_get_my_merchants(self, partner_client, session):
        merchants = [{"profileNo": "M-1"}, {"profileNo": "M-2"}]
        session.request.return_value = build_response(200, merchants)

        assert partner_client.get_my_merchants() == merchants

        call_args = session.request.call_args
        assert call_args[0] == ("GET", f"{BASE}/rest/partner/getMyMerchants")
        assert call_args[1]["headers"]["Authorization"] == f"Bearer {TOKEN}"

    def test_no_merchants_is_valid(self, partner_client, session):
        session.request.return_value = build_response(200, [])
        assert partner_client.get_my_merchants() == []

    def test_non_json_body_fails(self, partner_client, session):
        session.request.return_value = build_response(200, text="<html>")

        with pytest.raises(GatewayRequestError):
            partner_client.get_my_merchants()

    def test_get_merchant_keys(self, partner_client, session):
        session.request.return_value = build_response(200, {"apiId": "APP_ID_1", "secretKey": "S"})

        result = partner_client.get_merchant_keys("email", "shop@example.com", "PROFILE-1")

        assert result["apiId"] == "APP_ID_1"
        call_args = session.request.call_args
        assert call_args[0] == (
            "GET",
            f"{BASE}/rest/partner/getMerchantKeys/email/shop%40example.com",
        )
        assert call_args[1]["params"] == {"profileNo": "PROFILE-1"}

    def test_get_merchant_keys_rejects_unknown_search_type(self, partner_client, session):
        with pytest.raises(InvalidArgumentError):
            partner_client.get_merchant_keys("iban", "SA00", "PROFILE-1")

        session.post.assert_not_called()

    def test_error_detail_extracted(self, partner_client, session):
        session.request.return_value = build_response(404, {"detail": "Merchant not found"})

        with pytest.raises(GatewayRequestError) as exc_info:
            partner_client.get_merchant_keys("cr", "1010", "PROFILE-1")

        assert str(exc_info.value) == "Merchant not found, Status code: 404"


class TestArchiveMerchant:

    def test_sandbox(self, partner_client, session):
        session.request.return_value = build_response(200, {"archived": True})

        assert partner_client.archive_merchant("1010", "cr", "PROFILE-1") == {"archived": True}

        call_args = session.request.call_args
        assert call_args[0] == ("POST", f"{BASE}/rest/partner/test/archive-merchant/PROFILE-1")
        assert call_args[1]["json"] == {"keyType": "cr", "key": "1010"}

    def test_production_refused_before_network(self, session):
        client = PartnerClient.production("P", "K", session=session)

        with pytest.raises(EnvironmentRestrictionError):
            client.archive_merchant("1010", "cr", "P")

        session.post.assert_not_called()
        session.request.assert_not_called()


class TestOnboarding:
    """Test the four registration steps in sequence."""

    def test_full_flow(self, partner_client, session):
        session.request.side_effect = [
            build_response(200, {"signature": "sig-1", "sessionUuid": "uuid-1"}),
            build_response(200, {"signature": "sig-2", "sessionUuid": "uuid-1"}),
            build_response(200, {"signature": "sig-3", "sessionUuid": "uuid-1"}),
            build_response(200, {"status": "PENDING_NAFATH"}),
        ]

        step1 = partner_client.check_license(
            "cr", "1010101010", "0512345678", "1445", "05", "12", "PROFILE-1"
        )
        step2 = partner_client.validate_mobile(
            step1["signature"], step1["sessionUuid"], "0512345678", "1234", "PROFILE-1"
        )
        step3 = partner_client.add_info(
            step2["signature"],
            step2["sessionUuid"],
            "0512345678",
            "PROFILE-1",
            "SA0380000000608010167519",
            "Al Rajhi",
            "Books",
            "1000-5000",
            "domestic",
            "1000000000",
            "Shop",
            "shop@example.com",
            "Mohammed",
            "Ali",
            "s3cret!",
        )
        step4 = partner_client.confirming_with_nafath(
            step3["signature"], step3["sessionUuid"], "0512345678", "PROFILE-1"
        )

        assert step4 == {"status": "PENDING_NAFATH"}
        assert session.post.call_count == 1

        calls = session.request.call_args_list
        assert [c[0][1] for c in calls] == [
            f"{BASE}/api/partner/register/check-license",
            f"{BASE}/api/partner/register/validate-otp",
            f"{BASE}/api/partner/register/add-info",
            f"{BASE}/api/partner/register/confirm-account",
        ]
        assert calls[0][1]["json"] == {
            "registrationType": "cr",
            "licenseNumber": "1010101010",
            "mobileNumber": "0512345678",
            "hijriYear": "1445",
            "hijriMonth": "05",
            "hijriDay": "12",
            "partnerProfileNo": "PROFILE-1",
        }
        assert calls[1][1]["json"]["signature"] == "sig-1"
        assert calls[1][1]["json"]["otp"] == "1234"
        assert calls[2][1]["json"]["bankName"] == "Al Rajhi"
        assert calls[2][1]["json"]["sessionUuid"] == "uuid-1"
        assert calls[3][1]["json"] == {
            "signature": "sig-3",
            "sessionUuid": "uuid-1",
            "mobile": "0512345678",
            "partnerProfileNo": "PROFILE-1",
        }

    def test_step_failure(self, partner_client, session):
        session.request.return_value = build_response(400, {"title": "Invalid OTP"})

        with pytest.raises(GatewayRequestError) as exc_info:
            partner_client.validate_mobile("sig", "uuid", "0512345678", "0000", "PROFILE-1")

        assert str(exc_info.value) == "Invalid OTP, Status code: 400"
