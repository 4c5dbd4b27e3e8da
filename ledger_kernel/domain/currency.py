"""Currency -- ISO 4217 codes and their fraction digits."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """A single ISO 4217 currency and its canonical number of fraction digits."""

    code: str
    fraction_digits: int

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount, e.g. 0.01 for USD, 1 for JPY."""
        return Decimal(1).scaleb(-self.fraction_digits)


def _codes(block: str) -> tuple[str, ...]:
    return tuple(block.split())


class CurrencyRegistry:
    """Registry of ISO 4217 currencies keyed by code.

    Codes not listed under an explicit precision group use two fraction
    digits, which is the ISO 4217 norm.
    """

    _ZERO_DIGITS: ClassVar[tuple[str, ...]] = _codes("""
        BIF CLP DJF GNF ISK JPY KMF KRW PYG RWF UGX UYI VND VUV XAF XOF XPF
        XAG XAU XBA XBB XBC XBD XDR XPD XPT XSU XTS XUA XXX
    """)
    _THREE_DIGITS: ClassVar[tuple[str, ...]] = _codes("""
        BHD IQD JOD KWD LYD OMR TND
    """)
    _FOUR_DIGITS: ClassVar[tuple[str, ...]] = _codes("CLF UYW")
    _TWO_DIGITS: ClassVar[tuple[str, ...]] = _codes("""
        AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BMD BND BOB
        BOV BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CNY COP COU CRC CUC
        CUP CVE CZK DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD
        GTQ GYD HKD HNL HTG HUF IDR ILS INR IRR JMD KES KGS KHR KPW KYD KZT
        LAK LBP LKR LRD LSL MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK MXN
        MXV MYR MZN NAD NGN NIO NOK NPR NZD PAB PEN PGK PHP PKR PLN QAR RON
        RSD RUB SAR SBD SCR SDG SEK SGD SHP SLE SOS SRD SSP STN SVC SYP SZL
        THB TJS TMT TOP TRY TTD TWD TZS UAH USD USN UYU UZS VED VES WST XCD
        YER ZAR ZMW ZWL
    """)

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        code: CurrencyInfo(code, digits)
        for digits, group in (
            (2, _TWO_DIGITS),
            (0, _ZERO_DIGITS),
            (3, _THREE_DIGITS),
            (4, _FOUR_DIGITS),
        )
        for code in group
    }

    @staticmethod
    def normalize(code: object) -> str:
        if not isinstance(code, str):
            return ""
        return code.strip().upper()

    @classmethod
    def is_valid(cls, code: object) -> bool:
        """Check if a currency code is a known ISO 4217 code."""
        return cls.normalize(code) in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: object) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(cls.normalize(code))

    @classmethod
    def get_fraction_digits(cls, code: str) -> int:
        """Canonical fraction digits for a known currency.

        Raises:
            KeyError: if the code is not registered.
        """
        return cls._CURRENCIES[cls.normalize(code)].fraction_digits

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        return frozenset(cls._CURRENCIES)
