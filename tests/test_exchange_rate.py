from unittest import mock

import requests

from tripanalysis.rates.exchange_rate import ExchangeRateProvider, RateStatus


def _response(payload):
    response = mock.Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_same_currency_needs_no_request():
    with mock.patch("tripanalysis.rates.exchange_rate.requests.get") as get:
        provider = ExchangeRateProvider("INR", "inr")
        provider.start()
        assert provider.wait(0)
    get.assert_not_called()
    assert provider.status is RateStatus.NOT_NEEDED
    assert provider.rate is None


def test_rate_is_stored_once_and_announced():
    ready = mock.Mock()
    with mock.patch("tripanalysis.rates.exchange_rate.requests.get",
                    return_value=_response({"rates": {"EUR": 0.0107}})) as get:
        provider = ExchangeRateProvider("INR", "EUR", url_template="https://rates.test/{base}", timeout=3,
                                        on_ready=ready)
        assert provider.status is RateStatus.PENDING and provider.rate is None
        provider.start()
        provider.start()
        assert provider.wait(5)
    get.assert_called_once_with("https://rates.test/INR", timeout=3)
    assert provider.status is RateStatus.READY
    assert provider.rate == 0.0107
    ready.assert_called_once_with(0.0107)


def test_network_failure_degrades_to_unavailable():
    ready = mock.Mock()
    with mock.patch("tripanalysis.rates.exchange_rate.requests.get",
                    side_effect=requests.ConnectionError("offline")):
        provider = ExchangeRateProvider("INR", "EUR", on_ready=ready)
        provider.start()
        assert provider.wait(5)
    assert provider.status is RateStatus.UNAVAILABLE
    assert provider.rate is None
    ready.assert_not_called()


def test_missing_currency_in_payload_is_unavailable():
    with mock.patch("tripanalysis.rates.exchange_rate.requests.get",
                    return_value=_response({"rates": {"USD": 0.012}})):
        provider = ExchangeRateProvider("INR", "EUR")
        provider.start()
        assert provider.wait(5)
    assert provider.status is RateStatus.UNAVAILABLE


def test_failing_refresh_callback_does_not_escape():
    with mock.patch("tripanalysis.rates.exchange_rate.requests.get",
                    return_value=_response({"rates": {"EUR": 0.01}})):
        provider = ExchangeRateProvider("INR", "EUR", on_ready=mock.Mock(side_effect=RuntimeError("boom")))
        provider.start()
        assert provider.wait(5)
    assert provider.status is RateStatus.READY
