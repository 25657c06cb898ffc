"""
contract_extractor.py

Field extraction for private contracts: car rentals, vehicle sales,
real-estate sales and general agreements.

Subtype detection runs first because it decides party roles, which amount
strategy applies, whether asset details are property or vehicle details,
and the scoring denominator (13 for both sale subtypes, 15 otherwise).
"""

import logging
import re
from typing import List, Optional, Tuple

from DocExtract import config
from DocExtract.normalizer import (
    clean_text,
    extract_number,
    first_match,
    normalize_digits,
    rule,
)
from DocExtract.quality import CONTRACT_SCORER, QualityReport
from DocExtract.schemas import (
    ContractParty,
    ContractRecord,
    PropertyDetails,
    VehicleDetails,
)

logger = logging.getLogger(__name__)

CAR_RENTAL = "Contract - Car Rental"
VEHICLE_SALE = "Contract - Vehicle Sale"
PROPERTY_SALE = "Contract - Sale and Purchase"
GENERAL = "Contract - General"

ROLES = {
    CAR_RENTAL: ("Lessor (المؤجر)", "Tenant (المستأجر)"),
}
DEFAULT_ROLES = ("Seller (البائع)", "Buyer (المشتري)")

_UNIT_WORDS = "مليون|ملايين|ماليين|ألف|الاف|الف|آلاف"
_UNITS = r"(?:" + _UNIT_WORDS + r")"
_MILLIONS = r"(مليون|ملايين|ماليين)"
_FOREIGN_CURRENCY = re.compile(r"دولار|دوالر|USD|\$", re.IGNORECASE)
_SEPARATORS = re.compile(r"[.,،٬]")
_YEAR = re.compile(r"(?:19|20)\d{2}")


# -----------------------------
# Preprocessing
# -----------------------------
def preprocess_contract_text(text: str) -> str:
    """
    Clean, digit-normalize and repair glued tokens common in contract scans.

    Party and clause markers glued to the previous word get a separating
    space, colon spacing is unified and whitespace runs are collapsed.
    """
    raw = normalize_digits(clean_text(text))
    raw = re.sub(
        r"(\S)(?=(?:الفريق|الطرف|المؤجر|المستأجر|البائع|المشتري|البند))",
        r"\1 ",
        raw,
    )
    raw = re.sub(r":\s*", ": ", raw)
    raw = re.sub(r"\s{2,}", " ", raw)
    raw = raw.replace("البنداألول", "البند الأول")
    raw = raw.replace("البنده", "البند")
    return raw


def detect_subtype(raw: str) -> Optional[str]:
    """Contract subtype label; more specific subtypes are tested first."""
    if re.search(r"[اإأﺁ]يجار\s*سيار[ةه]|أجار\s*سيار[ةه]", raw):
        return CAR_RENTAL

    if (
        re.search(r"عقد\s*بيع\s*مركبة|بيع\s*مركبة", raw)
        or ("مركبة" in raw and ("السيارة ذات الرقم" in raw or "المركبات" in raw))
    ):
        return VEHICLE_SALE

    if (
        "بيع" in raw
        and any(word in raw for word in ("شراء", "المشتري", "البائع"))
        and re.search(r"مسكن|عقار|محل\s*تجاري|قطعة", raw)
    ):
        return PROPERTY_SALE

    if "عقد" in raw:
        return GENERAL

    return None


# -----------------------------
# Parties
# -----------------------------
_NAME_STOPS = re.compile(
    r"\b(?:من\s*مواليد|رقم\s*وطني|رقمة\s*الوطني|تولد|تاريخ\s*الولادة"
    r"|محل\s*و\s*تاريخ|رقم\s*الهوية)\b"
)


def sanitize_name(value: str) -> str:
    """
    Reduce a captured party string to the person's name.

    Cuts at birth/ID markers, keeps the first of two spouse names joined by
    ' و ' (unless it is a lineage 'ابن X و Y'), drops long digit runs and
    caps the result at 8 words.
    """
    name = re.sub(r"^[\s.\-:،]+", "", value).strip()
    name = re.sub(r"^(?:البائع|المشتري|المؤجر|المستأجر)\s*:\s*", "", name).strip()
    name = _NAME_STOPS.split(name)[0].strip()

    if not re.search(r"ابن\s+\w+\s*و\s*\w+", name):
        name = re.split(r"\s+و\s+(?=[\u0600-\u06ff])", name)[0].strip()

    name = re.sub(r"[0-9/\-]{4,}", "", name).strip()
    name = re.sub(r"\s*و\s*$", "", name).strip()
    name = re.sub(r"\s{2,}", " ", name)
    return " ".join(name.split()[:8])


def _scan_for_name(section: str) -> Optional[str]:
    """First line that looks like a name: >= 2 words, few digits, no headings."""
    for line in (ln.strip() for ln in section.split("\n")):
        if not line:
            continue
        if re.search(r"الفريق\s*الأول|الطرف\s*الأول|عقد|موضوع", line):
            continue
        if re.search(r"\b(?:بند|البند|موضوع|محضر|سياره|رقم)\b", line):
            continue
        digits = sum(ch.isdigit() for ch in line)
        if len(line.split()) >= 2 and digits / max(1, len(line)) < 0.25:
            return line
    return None


def extract_parties(
    raw: str, subtype: Optional[str]
) -> Tuple[Optional[ContractParty], Optional[ContractParty]]:
    first_role, second_role = ROLES.get(subtype, DEFAULT_ROLES)

    marker = re.search(r"الفريق\s*الثاني|الطرف\s*الثاني|المستأجر|المشتري", raw)
    first_section = raw[: marker.start()] if marker else raw
    second_section = raw[marker.start():] if marker else raw

    first_party = None
    match = re.search(r"الفريق\s*(?:الأول|الاول|األول)\s*[:\-]?\s*([^\n.،]+)", first_section)
    candidate = match.group(1).strip() if match else None
    if candidate and re.search(r"البند|بند", candidate):
        candidate = None
    if not candidate:
        candidate = _scan_for_name(first_section)
    if candidate:
        name = sanitize_name(candidate)
        if name:
            first_party = ContractParty(name=name, role=first_role)

    second_party = None
    match = re.search(
        r"(?:الفريق|الطرف)\s*(?:الثاني|الثانى)?\s*[:\s\-]?\s*([^\n]+)", second_section
    )
    if match:
        captured = match.group(1).strip()
        birth = re.search(r"تولد\s*(?:[^\s\d]+\s*)?([0-9/\-]{4,12})", captured)
        name = sanitize_name(re.split(r"تولد|رقم\s*وطني", captured)[0].strip())
        if name:
            second_party = ContractParty(
                name=name,
                role=second_role,
                birth_date=birth.group(1) if birth else None,
            )

    return first_party, second_party


# -----------------------------
# Amounts
# -----------------------------
def _strip_separators(value: str) -> str:
    return _SEPARATORS.sub("", value)


def _property_sale_amount(raw: str) -> Optional[Tuple[str, str]]:
    match = re.search(
        r"(?:بدل\s*البيع|مبلغ\s*(?:وقدره|قدره)?)\D{0,40}?(\d+(?:[,،٬.]\d+)*)"
        r"\s*(?:دولار|دوالر|USD|\$|ليرة)",
        raw,
        re.IGNORECASE,
    )
    if not match:
        return None
    currency = (
        config.FOREIGN_CURRENCY
        if _FOREIGN_CURRENCY.search(match.group(0))
        else config.LOCAL_CURRENCY
    )
    return _strip_separators(match.group(1)), currency


VEHICLE_AMOUNT_RULES = (
    rule(r"(\d+)\s+ثانيا[\s\S]{0,200}?بمبلغ\s*(?:اجمالي|إجمالي)", lambda m: f"{m.group(1)} مليون"),
    rule(
        r"بمبلغ\s*(?:اجمالي|إجمالي|اجمالى)\s*(?:وقدره|قدره)?\s*(?:فقط)?\s*(\d+)\s*" + _MILLIONS,
        lambda m: f"{m.group(1)} {m.group(2)}",
    ),
    rule(
        r"بمبلغ\s*(?:اجمالي|إجمالي|اجمالى)[\s\S]{0,100}?(\d+)[\s\S]{0,30}?" + _MILLIONS,
        lambda m: f"{m.group(1)} {m.group(2)}",
    ),
)

DOWN_PAYMENT_RULES = (
    rule(
        r"دفع\s*الفريق\s*الثاني[^\n]*?مبلغا?\s*(?:وقدره)?\s*(\d+)\s*" + _MILLIONS,
        lambda m: f"{m.group(1)} {m.group(2)}",
    ),
)

_RENT_CANDIDATE = re.compile(
    r"(البند\s*الثاني|ايجار|استئجار|إيجار|أجار|قام\s*الفريق\s*الاول\s*بايجار|بايجار"
    r"|بمبلغ\s*(?:وقدره|قدره)?)[\s\S]{0,160}?(\d+)\s*(" + _UNIT_WORDS + r")?"
)


def _rent_amount(raw: str) -> Optional[str]:
    """
    Rent-shaped amount closest to the second clause.

    Every candidate in [1, 1,000,000] is collected; when the second clause
    marker exists, the candidate starting nearest to it wins.
    """
    candidates = []
    for match in _RENT_CANDIDATE.finditer(raw):
        number, unit = match.group(2), match.group(3)
        if not 1 <= int(number) <= 1_000_000:
            continue
        candidates.append((f"{number} {unit}" if unit else number, match.start()))

    if not candidates:
        return None

    second_clause = re.search(r"البند\s*الثاني", raw)
    if second_clause is None:
        return candidates[0][0]
    anchor = second_clause.start()
    return min(candidates, key=lambda c: abs(c[1] - anchor))[0]


def _deposit(match: re.Match) -> Optional[str]:
    value = match.group(1).strip()
    value = _strip_separators(value)
    swapped = re.match(r"(" + _UNIT_WORDS + r")\s*(\d+)", value)
    if swapped:
        value = f"{swapped.group(2)} {swapped.group(1)}"
    return value or None


DEPOSIT_RULES = (
    rule(
        r"مبلغ\s*(?:قدره|وقدره)?[^\n]*?(\d+[.,،٬]\d{3}(?:[.,،٬]\d{3})*|\d{4,})"
        r"[^\n]*?(?:دولار|دوالر|USD|\$)[^\n]*?(?:عربون|تأمين)",
        _deposit,
        re.IGNORECASE,
    ),
    rule(
        r"(?:دفع|سدد)\s*الفريق\s*الثاني[^\n]*?(?:مبلغ|مبـلغ|مبلغا)[^\n]*?"
        r"(\d+(?:\s*" + _UNITS + r")?)[^\n]*?(?:عربون|تأمين|تامين|كتامين)",
        _deposit,
    ),
    rule(
        r"(?:عربون|تأمين|تامين|كتامين)[^\n]*?مبلغ[^\n]*?(\d+(?:\s*" + _UNITS + r")?)",
        _deposit,
    ),
)

DURATION_RULES = (
    rule(r"مد[ةه]\s*العقد[:\s]*([^\n.]+)"),
    rule(r"(?:لمدة|المدة)[:\s]+([^\n.]+)"),
    rule(r"(\d+)\s*(?:سنة|سنوات|شهر|شهور|اشهر|يوم|ايام)"),
)


# -----------------------------
# Dates
# -----------------------------
def _dated(match: re.Match) -> Optional[str]:
    """Keep a date candidate only if it carries a 19xx/20xx year."""
    value = re.sub(r"\s", "", match.group(1))
    return value if _YEAR.search(value) else None


_DMY = r"(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{4})"
_YMD = r"(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})"

# Execution-date patterns, most specific first; the first five also run
# against the closing section of the document
DATE_RULES = (
    rule(r"قبلهما\s*في\s*\n*\.?\s*" + _DMY, _dated),
    rule(r"\.\s*" + _YMD + r"\s+(?:الجمهورية|ملاحظات|شاهد)", _dated),
    rule(r"في\s+\n*\.?\s*" + _YMD + r"\s*\n+\s*:?\s*(?:ملاحظات|شاهد)", _dated),
    rule(r"حرر\s*(?:وكل|هذا\s*العقد)?.*?(?:في|بتاريخ)\s*" + _DMY, _dated),
    rule(r"(?:والبيان\s*حرر|البيان.*?حرر).*?(?:في|بتاريخ)\s*" + _DMY, _dated),
    rule(r"(?:بتاريخ|تاريخ)\s*" + _YMD, _dated),
    rule(r"(?:بتاريخ|حرر|في|تاريخ)\s*[:\-]?\s*" + _DMY, _dated),
)
_CLOSING_DATE_RULES = DATE_RULES[:5]
_ANY_DATE = re.compile(r"\d{2,4}[/\-.]\d{1,2}[/\-.]\d{2,4}")


def extract_contract_date(raw: str) -> Optional[str]:
    """
    Execution date, searched from the end of the document first.

    Payment and birth dates appear earlier in the body, so the closing
    800 characters are tried before the whole text, and the last
    date-shaped string in the final 500 characters is the last resort.
    """
    found = first_match(_CLOSING_DATE_RULES, raw[-800:])
    if found:
        return found

    found = first_match(DATE_RULES, raw)
    if found:
        return found

    for candidate in reversed(_ANY_DATE.findall(raw[-500:])):
        if _YEAR.search(candidate):
            return candidate
    return None


# -----------------------------
# Asset details
# -----------------------------
PROPERTY_TYPES = (
    (re.compile(r"مسكن|شقة|بيت|منزل"), "Residential (مسكن)"),
    (re.compile(r"محل\s*تجاري|محل"), "Commercial Shop (محل تجاري)"),
    (re.compile(r"أرض|ارض|قطعة\s*أرض"), "Land (أرض)"),
    (re.compile(r"مكتب"), "Office (مكتب)"),
    (re.compile(r"مستودع|مخزن"), "Warehouse (مستودع)"),
    (re.compile(r"عمارة|بناء"), "Building (عمارة)"),
)


def _identifier(match: re.Match) -> Optional[str]:
    value = re.sub(r"\s*(?:من|في|ال|من\s*ال)\s*$", "", match.group(1).strip()).strip()
    return value or None


def _area(match: re.Match) -> Optional[str]:
    value = match.group(1)
    if 10 <= float(value.replace(",", ".")) <= 100_000:
        return f"{value} متر مربع"
    return None


def _first_clause_location(match: re.Match) -> Optional[str]:
    inner = re.search(r"في\s*([أ-ي\s]{4,40}?)(?:\s*محله|\s*المحدود)", match.group(0))
    return inner.group(1).strip() if inner else None


LOCATION_RULES = (
    rule(r"(?:الكائن\s*في|كائن\s*في)\s*([^.،\n]{5,80}?)(?:\s*(?:محله|المحدود|والموصوف|بموجب|\.|،))"),
    rule(r"البند\s*الاول[\s\S]{0,300}", _first_clause_location),
)

_PLOT_NUMBER = re.compile(r"(?:المحضر|محضر)\s*رقم\s*(\d+)")


def extract_property_details(raw: str) -> PropertyDetails:
    details = PropertyDetails()

    for pattern, label in PROPERTY_TYPES:
        if pattern.search(raw):
            details.type = label
            break

    details.identifier = first_match(
        (rule(r"(?:مسكن|شقة|محل|أرض|قطعة)\s*رقم\s*(\S+(?:\s+\S+)?)", _identifier),), raw
    )
    details.plot_number = extract_number(_PLOT_NUMBER, raw)
    details.location = first_match(LOCATION_RULES, raw)
    details.area = first_match(
        (rule(r"(\d+(?:[.,]\d+)?)\s*(?:متر\s*مربع|م²|متر)", _area),), raw
    )
    details.registry_zone = first_match((rule(r"المنطقه\s*العقاريه\s*([^\s.،\n]+)"),), raw)
    return details


def _plate_near_vehicle(match: re.Match) -> Optional[str]:
    for sequence in re.findall(r"\d{6,9}", match.group(0)):
        if not _YEAR.search(sequence):
            return sequence
    return None


PLATE_RULES = (
    rule(r"(?:السيار[ةه]\s*ذات\s*(?:ال)?رقم|موضوع\s*العقد.*?رقم)\s*(\d{6,9})"),
    rule(r"(?:السيار[ةه]|سيار[ةه]|موضوع\s*العقد)[\s\S]{0,150}", _plate_near_vehicle),
)


def _make_model(match: re.Match) -> Optional[str]:
    value = re.sub(r"[.،;:\d]+$", "", match.group(1).strip()).strip()
    value = re.sub(r"مرسيدس(ميكرو|كونتي)", r"مرسيدس \1", value)
    value = re.sub(r"هونداي(ميكروباص)", r"هونداي \1", value)
    return value or None


def _reversed_make_model(match: re.Match) -> Optional[str]:
    # OCR sometimes emits the model before the make ("ميكرومرسيدس")
    return re.sub(r"^(ميكرو|كونتي)(\w+)$", r"\2 \1", match.group(1))


MAKE_MODEL_RULES = (
    rule(
        r"(مرسيدس(?:\s*ميكرو)?(?:\s*كونتي)?(?:[ \t]+[^\s.،\d]{1,20})?"
        r"|ميكروباص(?:[ \t]+[^\s.،\d]{1,20})?|سيارة\s*ميكروباص|ميكروباص\s*هونداي"
        r"|هونداي\s*ميكروباص|هونداي|تويوتا|كيا|هيونداي|بي\s*ام\s*دبليو|BMW|فورد)",
        _make_model,
        re.IGNORECASE,
    ),
    rule(
        r"(مرسيدس(?:ميكرو|كونتي)|هونداي(?:ميكروباص)?"
        r"|تويوتا(?:[A-Za-z0-9]{3,10})?|كيا(?:[A-Za-z0-9]{3,10})?)",
        _make_model,
    ),
    rule(r"(ميكرو(?:مرسيدس|هونداي)|كونتي(?:مرسيدس)?)", _reversed_make_model),
)

_COLOR_DENYLIST = {"المسجلة", "ماركة", "طراز", "رقم", "ذات", "الرقم"}


def _color(match: re.Match) -> Optional[str]:
    value = match.group(1).strip()
    return None if value in _COLOR_DENYLIST else value


COLOR_RULES = (
    rule(r"(?:لونها|اللون|طراز\s+لونها)\s*:?\s*([^\s\d.،]{3,15})", _color),
    rule(r"(?:كونتي|ميكرو|هونداي|تويوتا)(ابيض|اسود|ازرق|احمر|اخضر|رمادي|فضي|بني|اصفر)", _color),
)


def _governorate(match: re.Match) -> Optional[str]:
    value = match.group(match.re.groups).strip()
    if re.search(r"\d{6,}|المركبات", value):
        return None
    return value


REGISTRATION_RULES = (
    rule(r"محافظة\s*:\s*([^\s\d]{3,20})", _governorate),
    rule(r"محافظة\s*:?\s*([أ-ي]{3,15})", _governorate),
    rule(r"(ابيض|اسود|ازرق|احمر)\s*محافظة\s*:?\s*([أ-ي]{3,15})", _governorate),
)

# Taxi roof-sign number on rentals
_LANTERN_NUMBER = re.compile(r"(?:فانوس|رقم\s*الفانوس)\s*(\d+)")


def extract_vehicle_details(raw: str, subtype: str) -> Optional[VehicleDetails]:
    details = VehicleDetails(
        plate_number=first_match(PLATE_RULES, raw),
        type=first_match(MAKE_MODEL_RULES, raw),
    )

    if subtype == VEHICLE_SALE:
        details.color = first_match(COLOR_RULES, raw)
        details.registration_location = first_match(REGISTRATION_RULES, raw)

    if subtype == CAR_RENTAL:
        details.route = first_match((rule(r"خط\s*([^\s.،\n]{3,30})"),), raw)
        details.additional_id = extract_number(_LANTERN_NUMBER, raw)

    if not any(details.model_dump().values()):
        return None
    return details


# -----------------------------
# Terms
# -----------------------------
_ORDINALS = (
    "أول|اول|األول|ثاني|الثاني|ثالث|الثالث|رابع|الرابع|خامس|الخامس|سادس|السادس"
    "|سابع|السابع|ثامن|الثامن|تاسع|التاسع|عاشر|العاشر|حادي|الحادي"
)
_CLAUSE_HEADING = re.compile(r"البند[هة]?\s*(?:ال)?(?:" + _ORDINALS + r")[:\s]*")
_WORD_NUMBERS = "أولا|ثانيا|ثالثا|رابعا|خامسا|سادسا|سابعا|ثامنا|تاسعا|عاشرا"
_WORD_HEADING = re.compile(
    r"(?:" + _WORD_NUMBERS + r")\s*:?\s*"
    r"([^\n]+(?:\n(?!(?:" + _WORD_NUMBERS + r"|شاهد))[^\n]+)*)"
)
_NUMBERED_ITEM = re.compile(r"(?:^|\n)(\d+)[)\-.]\s*([^\n]+)")
_MAX_TERM_LENGTH = 250


def _shorten_clause(segment: str) -> str:
    """Cut a long clause at a sentence boundary, else hard-truncate at 200."""
    if len(segment) <= _MAX_TERM_LENGTH:
        return segment

    sentences = re.split(r"\.\s+", segment)
    if len(sentences) == 1:
        return segment[:200] + "..."

    accumulated = sentences[0]
    if len(accumulated) < 200 and sentences[1]:
        accumulated += ". " + sentences[1]
    if len(accumulated) > _MAX_TERM_LENGTH:
        return accumulated[:200] + "..."
    return accumulated


def _add_term(terms: List[str], segment: str, stop: str) -> None:
    segment = re.split(stop, segment)[0]
    segment = re.sub(r"^[:\-\s.،]+", "", segment).strip()
    segment = _shorten_clause(segment)
    if len(segment) > 15 and segment not in terms:
        terms.append(segment)


def extract_terms(raw: str) -> List[str]:
    """
    Ordered clause texts.

    Ordinal 'البند' headings are preferred; 'أولا/ثانيا/...' headings and
    then a plain numbered list are used while fewer than 3 clauses are found.
    """
    terms: List[str] = []

    headings = list(_CLAUSE_HEADING.finditer(raw))
    for i, heading in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(raw)
        _add_term(
            terms,
            raw[heading.end():end].strip(),
            r"(?=شاهد\s+شاهد|المؤجر\s*المستأجر|البائع\s*المشتري)",
        )

    if len(terms) < 3:
        for match in _WORD_HEADING.finditer(raw):
            _add_term(terms, match.group(1).strip(), r"(?=شاهد|البائع\s+المشتري|مالحظات)")

    if len(terms) < 3:
        for match in _NUMBERED_ITEM.finditer(raw):
            item = match.group(2).strip()
            if len(item) <= 10:
                continue
            item = item[:200] + "..." if len(item) > 200 else item
            if item not in terms:
                terms.append(item)

    return terms


# -----------------------------
# Public API
# -----------------------------
def extract_contract(text: str) -> ContractRecord:
    """
    Extract a contract record from acquired document text.

    Args:
        text: Acquired text (digits and whitespace may still be raw).

    Returns:
        ContractRecord with subtype, parties, amounts, dates, asset details,
        clauses and a derived quality score.
    """
    logger.info("Starting contract extraction (%d chars)", len(text or ""))

    raw = preprocess_contract_text(text)
    record = ContractRecord(raw_text=text or "")

    subtype = detect_subtype(raw)
    record.document_type = subtype
    record.first_party, record.second_party = extract_parties(raw, subtype)

    amount = None
    if subtype == PROPERTY_SALE:
        found = _property_sale_amount(raw)
        if found:
            amount, record.contract_currency = found
    elif subtype == VEHICLE_SALE:
        amount = first_match(VEHICLE_AMOUNT_RULES, raw)
        if amount:
            record.contract_currency = config.LOCAL_CURRENCY
            record.down_payment = first_match(DOWN_PAYMENT_RULES, raw)

    monthly = False
    if amount is None:
        amount = _rent_amount(raw)
        if amount:
            record.contract_currency = (
                config.FOREIGN_CURRENCY
                if _FOREIGN_CURRENCY.search(raw)
                else config.LOCAL_CURRENCY
            )
            monthly = bool(re.search(r"شهري|شهريا", raw))
    record.contract_amount = amount

    record.security_deposit = first_match(DEPOSIT_RULES, raw)
    record.contract_duration = first_match(DURATION_RULES, raw) or ("شهري" if monthly else None)
    record.contract_date = extract_contract_date(raw)

    if subtype == PROPERTY_SALE:
        record.property_details = extract_property_details(raw)
    if subtype in (CAR_RENTAL, VEHICLE_SALE):
        record.vehicle_details = extract_vehicle_details(raw, subtype)

    record.contract_terms = extract_terms(raw)

    total = (
        config.SALE_CONTRACT_TOTAL_FIELDS
        if subtype in (PROPERTY_SALE, VEHICLE_SALE)
        else config.CONTRACT_TOTAL_FIELDS
    )
    report = QualityReport(CONTRACT_SCORER, total)
    for value in (
        record.document_type,
        record.first_party,
        record.second_party,
        record.contract_amount,
        record.security_deposit,
        record.contract_duration,
        record.contract_date,
    ):
        report.hit(value)

    prop = record.property_details
    if prop is not None:
        report.hit(prop.type or prop.identifier or prop.location, weight=2)

    vehicle = record.vehicle_details
    if vehicle is not None:
        report.hit(vehicle.plate_number)
        report.hit(vehicle.type)

    report.hit(record.contract_terms, weight=min(3, len(record.contract_terms)))

    witness_markers = len(re.findall(r"شاهد|الشهود|اشهد", raw))
    report.hit(True if witness_markers >= 2 else None)

    if record.first_party is None:
        report.add_issue("First party not found")
    if record.second_party is None:
        report.add_issue("Second party not found")
    if record.contract_amount is None:
        report.add_issue("Contract amount not found")
    if record.contract_date is None and re.search(r"بتاريخ|حرر.*العقد|تاريخ.*العقد", raw):
        report.add_issue("Contract date not found (but likely exists)")

    record.confidence = report.confidence
    record.extraction_quality = report.build()

    logger.info(
        "Contract extraction complete: type=%s, score=%d%% (%d/%d), confidence=%s",
        subtype, report.score, report.points, report.total, record.confidence,
    )
    if report.issues:
        logger.warning("Issues found: %s", ", ".join(report.issues))

    return record
