import pytest

from tradejournal.services.trade_entry import (
    OUTCOME_FIELDS,
    TradeValidationError,
    enrich_trade,
    validate_trade_entry,
)


def test_valid_entry_passes(long_entry):
    validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])


@pytest.mark.parametrize(
    "missing,message",
    [
        ("trade_date", "Please fill in trade date"),
        ("trade_time", "Please fill in trade time"),
        ("session", "Please select a trading session"),
        ("account_balance", "Please fill in account balance"),
        ("direction", "Please select trade direction"),
        ("entry_price", "Please fill in entry price"),
        ("stop_loss", "Please fill in stop loss"),
        ("risk_percent", "Please select risk percentage"),
    ],
)
def test_required_fields_are_reported(long_entry, missing, message):
    long_entry[missing] = None
    with pytest.raises(TradeValidationError, match=message) as exc:
        validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])
    assert exc.value.field == missing


def test_long_stop_must_be_below_entry(long_entry):
    long_entry["stop_loss"] = 50000
    with pytest.raises(TradeValidationError, match="stop loss must be below entry price"):
        validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])


def test_short_stop_must_be_above_entry(long_entry):
    long_entry["direction"] = "Short"
    with pytest.raises(TradeValidationError, match="stop loss must be above entry price"):
        validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])


@pytest.mark.parametrize(
    "field,value",
    [
        ("session", "Tokyo"),
        ("direction", "Sideways"),
        ("risk_percent", 3),
        ("trade_date", "15/03/2024"),
        ("trade_time", "not a time at all"),
        ("trade_time", "25:00"),
        ("exit_time", "later"),
        ("exit_time", "21:75"),
    ],
)
def test_enumerations_are_enforced(long_entry, field, value):
    long_entry[field] = value
    with pytest.raises(TradeValidationError) as exc:
        validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])
    assert exc.value.field == field


@pytest.mark.parametrize("exit_time", [None, "", "23:45", "23:45:30"])
def test_exit_time_is_optional_but_must_be_a_clock_time(long_entry, exit_time):
    long_entry["exit_time"] = exit_time
    validate_trade_entry(long_entry, allowed_risk_percents=[1, 1.5, 2])


def test_risk_percent_choices_come_from_settings(long_entry, monkeypatch):
    monkeypatch.setattr("tradejournal.services.trade_entry.settings.ALLOWED_RISK_PERCENTS", "0.5,1")
    long_entry["risk_percent"] = 0.5
    validate_trade_entry(long_entry)

    long_entry["risk_percent"] = 2
    with pytest.raises(TradeValidationError, match="Risk percentage must be one of: 0.5, 1"):
        validate_trade_entry(long_entry)


def test_enrich_open_trade_leaves_outcome_absent(long_entry):
    enriched = enrich_trade(long_entry, tolerance=0.0)

    assert enriched["day_of_week"] == "Friday"
    assert enriched["risk_dollar"] == 100.0
    assert enriched["position_size"] == pytest.approx(0.1)
    assert enriched["risk_reward_ratio"] == 3.0
    for field in OUTCOME_FIELDS:
        assert enriched[field] is None


def test_enrich_does_not_mutate_input(long_entry):
    original = dict(long_entry)
    enrich_trade(long_entry)
    assert long_entry == original


def test_enrich_closed_long_trade(long_entry):
    long_entry.update({"exit_price": 51000, "exit_time": "23:45"})
    enriched = enrich_trade(long_entry, tolerance=0.0, wrap_overnight=True)

    assert enriched["pl_dollar"] == 100.0
    assert enriched["pl_percent"] == 2.0
    assert enriched["trade_result"] == "Win"
    assert enriched["trade_duration"] == "2h 30m"


def test_enrich_closed_short_break_even(long_entry):
    long_entry.update({"direction": "short", "stop_loss": 51000, "take_profit": 47000, "exit_price": 50000})
    enriched = enrich_trade(long_entry, tolerance=0.0)

    assert enriched["direction"] == "Short"
    assert enriched["pl_dollar"] == 0.0
    assert enriched["trade_result"] == "Break Even"
    assert enriched["trade_duration"] is None


def test_enrich_classifies_before_rounding(long_entry):
    long_entry["exit_price"] = 50000.01
    exact = enrich_trade(long_entry, tolerance=0.0)
    assert exact["pl_dollar"] == 0.0
    assert exact["trade_result"] == "Win"

    tolerant = enrich_trade(long_entry, tolerance=0.01)
    assert tolerant["trade_result"] == "Break Even"


def test_enrich_overnight_duration_follows_setting(long_entry):
    long_entry.update({"trade_time": "23:30", "exit_price": 51000, "exit_time": "01:00"})
    assert enrich_trade(long_entry, wrap_overnight=True)["trade_duration"] == "1h 30m"
    assert enrich_trade(long_entry, wrap_overnight=False)["trade_duration"] is None


def test_enrich_partial_form():
    enriched = enrich_trade({"account_balance": "10000", "risk_percent": "1"})
    assert enriched["risk_dollar"] == 100.0
    assert enriched["position_size"] == 0.0
    assert enriched["risk_reward_ratio"] is None
    assert enriched["day_of_week"] is None
    assert enriched["pl_dollar"] is None


def test_enrich_without_direction_has_no_outcome():
    enriched = enrich_trade({"entry_price": 100, "stop_loss": 90, "account_balance": 1000,
                             "risk_percent": 1, "exit_price": 80})
    assert enriched["position_size"] == 1.0
    assert enriched["pl_dollar"] is None
    assert enriched["pl_percent"] is None
    assert enriched["trade_result"] is None


def test_enrich_without_position_size_has_no_outcome(long_entry):
    long_entry.update({"stop_loss": None, "exit_price": 48000})
    enriched = enrich_trade(long_entry)
    assert enriched["position_size"] == 0.0
    assert enriched["trade_result"] is None
    assert enriched["pl_dollar"] is None
