"""Revenue split of one gross (tax-inclusive) fare.

    net_fare            = gross / (1 + tax_rate)
    tax_amount          = gross − net_fare
    platform_commission = net_fare × commission_rate
    driver_earnings     = net_fare × driver_share_rate

Amounts are held to céntimos.  Net fare and commission are rounded; tax and
driver earnings take the residuals, so the three parts always add back to the
gross fare exactly.
"""

from __future__ import annotations

from kommute_fares.config.tariff import DEFAULT_TARIFF, TariffConstants
from kommute_fares.engine.money import Money, quantize_cents, to_money
from kommute_fares.errors import InvalidInputError
from kommute_fares.models.results import FareSplit


def split_fare(gross_fare: Money, tariff: TariffConstants = DEFAULT_TARIFF) -> FareSplit:
    """Partition *gross_fare* into IVA, platform commission and driver earnings."""
    gross = to_money(gross_fare, "gross_fare")
    if gross < 0:
        raise InvalidInputError("gross_fare", gross_fare, "must be >= 0")
    gross = quantize_cents(gross)

    net = quantize_cents(gross / (1 + tariff.tax_rate))
    commission = quantize_cents(net * tariff.commission_rate)

    return FareSplit(
        gross_fare=gross,
        tax_amount=gross - net,
        net_fare=net,
        platform_commission=commission,
        driver_earnings=net - commission,
    )
