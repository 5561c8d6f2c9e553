"""
Feature classification module
Derives os_type, device_brand and device_type from the raw os/device/browser
strings using ordered first-match-wins rule chains.

Rules are plain data so each one can be tested on its own: a Rule pairs a
vectorized predicate over the session frame with either a constant label or
a vectorized extractor.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

MOBILE_TABLET = "Mobile/Tablet"
COMPUTER = "Computer"
OTHER = "Other"

RAW_COLUMNS = ["os", "device", "browser"]


@dataclass(frozen=True)
class Rule:
    """One (predicate, result) pair of a rule chain"""
    name: str
    when: Callable[[pd.DataFrame], pd.Series]
    then: Union[str, Callable[[pd.DataFrame], pd.Series]]


# ---------------------------------------------------------------------------
# Predicate / extractor builders
# ---------------------------------------------------------------------------

def contains(column: str, pattern: str) -> Callable[[pd.DataFrame], pd.Series]:
    return lambda df: df[column].str.contains(pattern, regex=True, na=False)


def equals_any(column: str, values) -> Callable[[pd.DataFrame], pd.Series]:
    values = list(values)
    return lambda df: df[column].isin(values).fillna(False).astype(bool)


def starts_with(column: str, prefix: str) -> Callable[[pd.DataFrame], pd.Series]:
    return lambda df: df[column].str.startswith(prefix).fillna(False).astype(bool)


def always(df: pd.DataFrame) -> pd.Series:
    return pd.Series(True, index=df.index)


def leading_brand_token(df: pd.DataFrame) -> pd.Series:
    """Leading run of 2+ letters ending at a space or hyphen, title-cased"""
    token = df["device"].str.extract(r"^([A-Za-z]{2,})(?=[ -])", expand=False)
    return token.str.title()


# ---------------------------------------------------------------------------
# Rule chains
# ---------------------------------------------------------------------------

OS_TYPE_RULES: List[Rule] = [
    Rule("linux_distribution", contains("os", r"Debian|Fedora|Mageia|MeeGo|Ubuntu|BSD"), "Linux"),
    Rule("windows", contains("os", r"Windows"), "Windows"),
    Rule("mac_os", contains("os", r"Mac OS"), "Mac OS"),
    Rule("linux", contains("os", r"Linux"), "Linux"),
    Rule("chrome_os", contains("os", r"Chrome OS"), "Chrome OS"),
    Rule("kindle", contains("os", r"Kindle"), "Kindle"),
    Rule("blackberry", contains("os", r"Black[Bb]erry"), "BlackBerry"),
    Rule("ios", contains("os", r"iOS"), "iOS"),
    Rule("android", contains("os", r"Android"), "Android"),
]

OS_TYPES = ["Linux", "Windows", "Mac OS", "Chrome OS", "Kindle", "BlackBerry", "iOS", "Android", OTHER]

DEVICE_BRAND_RULES: List[Rule] = [
    Rule("apple_os", equals_any("os", ["iOS", "Mac OS X"]), "Apple"),
    Rule("logicom", starts_with("device", "L-EMENT"), "Logicom"),
    Rule("amazon_kindle", contains("device", r"Kindle"), "Amazon"),
    Rule("leading_token", always, leading_brand_token),
]

DEVICE_TYPE_RULES: List[Rule] = [
    Rule("mobile_browser", contains("browser", r"Mobile"), MOBILE_TABLET),
    Rule("mobile_os_name", contains("os", r"Mobile|Phone|Bada|Symbian"), MOBILE_TABLET),
    Rule("mobile_os_type", equals_any("os_type", ["Android", "BlackBerry", "iOS"]), MOBILE_TABLET),
    Rule("desktop_os_type", equals_any("os_type", ["Windows", "Linux", "Mac OS"]), COMPUTER),
]


def apply_rules(df: pd.DataFrame, rules: List[Rule], default=pd.NA) -> pd.Series:
    """
    Evaluate a rule chain, first match wins

    Args:
        df: Frame holding every column the rules read
        rules: Ordered rules
        default: Value for rows no rule matched

    Returns:
        Series aligned on df.index
    """
    result = pd.Series(pd.NA, index=df.index, dtype="string")
    unresolved = pd.Series(True, index=df.index)

    for rule in rules:
        if not unresolved.any():
            break
        hit = rule.when(df).astype(bool) & unresolved
        if not hit.any():
            continue
        value = rule.then(df).astype("string") if callable(rule.then) else rule.then
        result = result.mask(hit, value)
        unresolved &= ~hit

    if not pd.isna(default):
        result = result.mask(unresolved, default)
    return result


def _blank_to_missing(series: pd.Series) -> pd.Series:
    """Empty or whitespace-only labels are reported as missing"""
    blank = (series.str.strip() == "").fillna(False).astype(bool)
    return series.mask(blank, pd.NA)


def classify_features(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add os_type, device_brand and device_type columns

    Args:
        df: Normalized sessions with os, device and browser columns

    Returns:
        New DataFrame with the three derived columns
    """
    out = df.copy()
    for col in RAW_COLUMNS:
        out[col] = out[col].astype("string")

    out["os_type"] = apply_rules(out, OS_TYPE_RULES, default=OTHER)
    out["device_brand"] = _blank_to_missing(apply_rules(out, DEVICE_BRAND_RULES))
    out["device_type"] = _blank_to_missing(apply_rules(out, DEVICE_TYPE_RULES))

    logger.info(
        "Classified %s sessions: %s without device type, %s without brand",
        f"{len(out):,}",
        f"{int(out['device_type'].isna().sum()):,}",
        f"{int(out['device_brand'].isna().sum()):,}",
    )
    return out


def classify_record(os=None, device=None, browser=None) -> dict:
    """
    Classify a single record through the same rule chains

    Returns:
        dict with os_type, device_brand and device_type (None when absent)
    """
    frame = pd.DataFrame({"os": [os], "device": [device], "browser": [browser]})
    row = classify_features(frame).iloc[0]
    return {
        key: (None if pd.isna(row[key]) else str(row[key]))
        for key in ("os_type", "device_brand", "device_type")
    }
