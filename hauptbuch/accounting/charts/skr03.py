"""SKR03 standard chart of accounts: statement mapping and seed accounts."""
from __future__ import annotations

from typing import List

from hauptbuch.accounting.classification import ChartMapping, CodeRangeRule, StatementLine
from hauptbuch.models import Account, AccountType

A = AccountType.ASSET
L = AccountType.LIABILITY
E = AccountType.EQUITY
R = AccountType.REVENUE
X = AccountType.EXPENSE

# Gewinn- und Verlustrechnung (Gesamtkostenverfahren, Staffelform)
INCOME_LINES = (
    StatementLine("revenue", "1. Umsatzerlöse"),
    StatementLine("revenue_other", "2. Sonstige betriebliche Erträge"),
)
EXPENSE_LINES = (
    StatementLine("material", "3. Materialaufwand"),
    StatementLine("personnel", "4. Personalaufwand"),
    StatementLine("depreciation", "5. Abschreibungen"),
    StatementLine("other_cost", "6. Sonstige betriebliche Aufwendungen"),
    StatementLine("interest", "7. Zinsen und ähnliche Aufwendungen"),
    StatementLine("taxes", "8. Steuern vom Einkommen und Ertrag"),
)

# Bilanz nach § 266 HGB (verkürzt)
AKTIVA_LINES = (
    StatementLine("act_A", "A. Anlagevermögen"),
    StatementLine("act_A_I", "I. Immaterielle Vermögensgegenstände", "act_A"),
    StatementLine("act_A_II", "II. Sachanlagen", "act_A"),
    StatementLine("act_A_III", "III. Finanzanlagen", "act_A"),
    StatementLine("act_B", "B. Umlaufvermögen"),
    StatementLine("act_B_I", "I. Vorräte", "act_B"),
    StatementLine("act_B_II", "II. Forderungen und sonstige Vermögensgegenstände", "act_B"),
    StatementLine(
        "act_B_III",
        "III. Kassenbestand, Bundesbankguthaben, Guthaben bei Kreditinstituten",
        "act_B",
    ),
    StatementLine("act_C", "C. Rechnungsabgrenzungsposten"),
)
PASSIVA_LINES = (
    StatementLine("pas_A", "A. Eigenkapital"),
    StatementLine("pas_A_I", "I. Kapital / Einlagen", "pas_A"),
    StatementLine("pas_A_II", "II. Gewinnvortrag / Verlustvortrag", "pas_A"),
    StatementLine("pas_A_III", "III. Jahresüberschuss / Jahresfehlbetrag", "pas_A"),
    StatementLine("pas_A_IV", "IV. Entnahmen / Einlagen (Privat)", "pas_A"),
    StatementLine("pas_B", "B. Rückstellungen"),
    StatementLine("pas_C", "C. Verbindlichkeiten"),
    StatementLine("pas_C_I", "I. Verbindlichkeiten aus Lieferungen und Leistungen", "pas_C"),
    StatementLine("pas_C_II", "II. Verbindlichkeiten gegenüber Kreditinstituten", "pas_C"),
    StatementLine("pas_C_III", "III. Sonstige Verbindlichkeiten (inkl. Steuer/Sozial)", "pas_C"),
)

RULES = (
    CodeRangeRule(R, 8000, 8999, "revenue", name_excludes="Eigenverbrauch"),
    CodeRangeRule(X, 3000, 3999, "material"),
    CodeRangeRule(X, 4100, 4199, "personnel"),
    CodeRangeRule(X, 4200, 4299, "other_cost"),
    CodeRangeRule(X, 4820, 4860, "depreciation"),
    CodeRangeRule(X, 2100, 2150, "interest"),
    CodeRangeRule(X, 2200, 2299, "taxes"),
    CodeRangeRule(A, 10, 49, "act_A_I"),
    CodeRangeRule(A, 50, 499, "act_A_II"),
    CodeRangeRule(A, 500, 699, "act_A_III"),
    CodeRangeRule(A, 3960, 3980, "act_B_I"),
    CodeRangeRule(A, 1400, 1549, "act_B_II"),
    CodeRangeRule(A, 1000, 1399, "act_B_III"),
    # Vorsteuer is a claim against the tax office.
    CodeRangeRule(A, 1570, 1599, "act_B_II"),
    CodeRangeRule(A, 980, 990, "act_C"),
    # Capital accounts mistyped as liabilities.
    CodeRangeRule(L, 800, 999, "pas_A_I", name_excludes="Rückstellung"),
    CodeRangeRule(L, 2300, 2399, "pas_B"),
    CodeRangeRule(L, 950, 979, "pas_B"),
    CodeRangeRule(L, 1600, 1699, "pas_C_I"),
    CodeRangeRule(L, 1705, 1709, "pas_C_II"),
    CodeRangeRule(L, 1700, 1999, "pas_C_III"),
    CodeRangeRule(E, 1800, 1899, "pas_A_IV"),
    CodeRangeRule(E, 860, 869, "pas_A_II"),
    CodeRangeRule(E, 800, 899, "pas_A_I"),
    CodeRangeRule(E, 900, 949, "pas_A_II"),
)

SKR03 = ChartMapping(
    name="skr03",
    rules=RULES,
    defaults={
        R: "revenue_other",
        X: "other_cost",
        A: "act_B_II",
        L: "pas_C_III",
        E: "pas_A_I",
    },
    income_lines=INCOME_LINES,
    expense_lines=EXPENSE_LINES,
    asset_lines=AKTIVA_LINES,
    equity_and_liability_lines=PASSIVA_LINES,
    retained_earnings_line="pas_A_II",
    net_result_line="pas_A_III",
)

SEED = (
    ("0010000", "Konzessionen, Lizenzen", A),
    ("0027000", "EDV-Software", A),
    ("0035000", "Geschäfts- oder Firmenwert", A),
    ("0050000", "Unbebaute Grundstücke", A),
    ("0080000", "Bauten auf eigenen Grundstücken", A),
    ("0090000", "Geschäftsbauten", A),
    ("0200000", "Technische Anlagen und Maschinen", A),
    ("0320000", "PKW", A),
    ("0350000", "LKW", A),
    ("0400000", "Betriebsausstattung", A),
    ("0410000", "Geschäftsausstattung", A),
    ("0420000", "Büroeinrichtung", A),
    ("0480000", "Geringwertige Wirtschaftsgüter (GWG) bis 800 €", A),
    ("0485000", "Wirtschaftsgüter (Sammelposten)", A),
    ("0500000", "Anteile an verbundenen Unternehmen", A),
    ("0800000", "Gezeichnetes Kapital", E),
    ("0860000", "Gewinnvortrag vor Verwendung", E),
    ("0950000", "Pensionsrückstellungen", L),
    ("0970000", "Sonstige Rückstellungen", L),
    ("1000000", "Kasse", A),
    ("1200000", "Bank (Girokonto)", A),
    ("1210000", "Bank 2 (Sparkonto/Tagesgeld)", A),
    ("1360000", "Geldtransit", A),
    ("1400000", "Forderungen a.L.L.", A),
    ("1500000", "Sonstige Vermögensgegenstände", A),
    ("1570000", "Abziehbare Vorsteuer", A),
    ("1571000", "Abziehbare Vorsteuer 7%", A),
    ("1576000", "Abziehbare Vorsteuer 19%", A),
    ("1600000", "Verbindlichkeiten a.L.L.", L),
    ("1700000", "Sonstige Verbindlichkeiten", L),
    ("1705000", "Darlehen", L),
    ("1740000", "Verbindlichkeiten aus Lohn und Gehalt", L),
    ("1770000", "Umsatzsteuer", L),
    ("1771000", "Umsatzsteuer 7%", L),
    ("1776000", "Umsatzsteuer 19%", L),
    ("1780000", "Umsatzsteuer-Vorauszahlungen", L),
    ("1800000", "Privatentnahmen", E),
    ("1890000", "Privateinlagen", E),
    ("2100000", "Zinsen und ähnliche Aufwendungen", X),
    ("2200000", "Körperschaftsteuer", X),
    ("2700000", "Sonstige Erträge", R),
    ("3200000", "Wareneingang 7% Vorsteuer", X),
    ("3400000", "Wareneingang 19% Vorsteuer", X),
    ("4100000", "Löhne und Gehälter", X),
    ("4110000", "Gesetzliche soziale Aufwendungen", X),
    ("4210000", "Miete", X),
    ("4240000", "Gas, Strom, Wasser", X),
    ("4360000", "Versicherungen", X),
    ("4500000", "Fahrzeugkosten", X),
    ("4600000", "Werbekosten", X),
    ("4830000", "Abschreibungen auf Sachanlagen", X),
    ("4855000", "Sofortabschreibung GWG", X),
    ("4900000", "Sonstige betriebliche Aufwendungen", X),
    ("4920000", "Telefon", X),
    ("4930000", "Bürobedarf", X),
    ("4970000", "Nebenkosten des Geldverkehrs", X),
    ("7100000", "Zinserträge", R),
    ("8100000", "Steuerfreie Umsätze", R),
    ("8300000", "Erlöse 7% USt", R),
    ("8400000", "Erlöse 19% USt", R),
    ("8910000", "Unentgeltliche Wertabgaben (Eigenverbrauch)", R),
)


def seed_accounts() -> List[Account]:
    """Return the SKR03 seed accounts; the code doubles as the account id."""
    return [Account(id=code, code=code, name=name, type=type_) for code, name, type_ in SEED]


__all__ = ["SKR03", "seed_accounts"]
