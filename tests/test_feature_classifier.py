import pandas as pd
import pytest

from src.feature_classifier import (
    Rule,
    OS_TYPES,
    OS_TYPE_RULES,
    DEVICE_TYPE_RULES,
    apply_rules,
    classify_features,
    classify_record,
    contains,
    _blank_to_missing,
)


class TestOsType:

    @pytest.mark.parametrize("os_name, expected", [
        ("Ubuntu", "Linux"),
        ("Fedora 30", "Linux"),
        ("FreeBSD", "Linux"),
        ("MeeGo", "Linux"),
        ("Linux", "Linux"),
        ("Windows 10", "Windows"),
        ("Windows Phone 8.1", "Windows"),
        ("Mac OS X", "Mac OS"),
        ("Chrome OS", "Chrome OS"),
        ("Kindle", "Kindle"),
        ("BlackBerry OS", "BlackBerry"),
        ("Blackberry", "BlackBerry"),
        ("iOS", "iOS"),
        ("Android 7.0", "Android"),
        ("Symbian OS", "Other"),
        ("windows 10", "Other"),
        ("", "Other"),
        (None, "Other"),
    ])
    def test_os_type(self, os_name, expected):
        assert classify_record(os=os_name)['os_type'] == expected

    def test_distribution_rule_wins_over_windows(self):
        assert classify_record(os="Debian (Windows Subsystem)")['os_type'] == "Linux"

    @pytest.mark.parametrize("label", OS_TYPES)
    def test_classification_is_idempotent(self, label):
        assert classify_record(os=label)['os_type'] == label

    def test_total_over_arbitrary_strings(self):
        values = ["", " ", "???", "Nokia", "Tizen 3.0", None, "Mac", "ios"]
        df = classify_features(pd.DataFrame({"os": values, "device": None, "browser": None}))
        assert set(df['os_type']) <= set(OS_TYPES)
        assert df['os_type'].notna().all()


class TestDeviceBrand:

    @pytest.mark.parametrize("os_name, device, expected", [
        ("iOS", "iPhone9,1", "Apple"),
        ("Mac OS X", "Other", "Apple"),
        ("Android 6.0", "L-EMENT 741", "Logicom"),
        ("Android 4.4", "Kindle Fire HDX", "Amazon"),
        ("Android 7.0", "Samsung SM-G930F", "Samsung"),
        ("Android 8.0", "HUAWEI-P20", "Huawei"),
        ("Android 8.0", "LG-H870", "Lg"),
        ("Android 8.0", "SM-G930F", "Sm"),
        ("Android 8.0", "iPhone9,1", None),
        ("Windows 10", "PC", None),
        ("Mac OS", "Mac", None),
        ("Android 8.0", "X Phone", None),
        (None, None, None),
    ])
    def test_device_brand(self, os_name, device, expected):
        assert classify_record(os=os_name, device=device)['device_brand'] == expected

    def test_apple_rule_needs_exact_os(self):
        # "iOS 12" is not one of the exact Apple OS names
        assert classify_record(os="iOS 12", device="iPhone")['device_brand'] is None


class TestDeviceType:

    def test_desktop_browser_on_windows_is_computer(self):
        result = classify_record(os="Windows 10", device="PC", browser="Mozilla/5.0")
        assert result['device_type'] == "Computer"

    def test_mobile_browser_rule_fires_first(self):
        result = classify_record(os="iOS", device="iPhone9,1", browser="Mobile Safari")
        assert result['device_type'] == "Mobile/Tablet"

    @pytest.mark.parametrize("os_name, browser, expected", [
        ("Windows Phone 8.1", "IE Mobile", "Mobile/Tablet"),
        ("Windows Phone 8.1", "IE", "Mobile/Tablet"),
        ("Bada", None, "Mobile/Tablet"),
        ("Symbian OS", "Nokia Browser", "Mobile/Tablet"),
        ("Android 9", "Chrome", "Mobile/Tablet"),
        ("BlackBerry OS", "BlackBerry", "Mobile/Tablet"),
        ("iOS", "Safari", "Mobile/Tablet"),
        ("Ubuntu", "Firefox", "Computer"),
        ("Mac OS X", "Safari", "Computer"),
        ("Chrome OS", "Chrome", None),
        ("Kindle", "Silk", None),
        (None, None, None),
        ("", "", None),
    ])
    def test_device_type(self, os_name, browser, expected):
        assert classify_record(os=os_name, browser=browser)['device_type'] == expected

    def test_never_empty_string(self):
        df = classify_features(pd.DataFrame({
            "os": ["", "Chrome OS", None, "Windows 10", "Tizen"],
            "device": ["", "", None, "PC", "Z"],
            "browser": ["", "", None, "", "Mobile"],
        }))
        assert not (df['device_type'] == "").fillna(False).any()
        assert set(df['device_type'].dropna()) <= {"Mobile/Tablet", "Computer"}
        assert not (df['device_brand'] == "").fillna(False).any()


class TestApplyRules:

    def test_first_match_wins(self):
        df = pd.DataFrame({"os": ["alpha beta", "beta", "gamma"]}, dtype="string")
        rules = [
            Rule("alpha", contains("os", "alpha"), "A"),
            Rule("beta", contains("os", "beta"), "B"),
        ]
        result = apply_rules(df, rules, default="Z")
        assert result.tolist() == ["A", "B", "Z"]

    def test_missing_default(self):
        df = pd.DataFrame({"os": ["gamma"]}, dtype="string")
        result = apply_rules(df, [Rule("alpha", contains("os", "alpha"), "A")])
        assert pd.isna(result.iloc[0])

    def test_callable_result(self):
        df = pd.DataFrame({"os": ["alpha one", "beta"]}, dtype="string")
        rules = [Rule("first_word", contains("os", " "), lambda f: f["os"].str.split(" ").str[0])]
        result = apply_rules(df, rules)
        assert result.iloc[0] == "alpha"
        assert pd.isna(result.iloc[1])

    def test_rule_order_is_part_of_the_chain(self):
        names = [rule.name for rule in OS_TYPE_RULES]
        assert names[0] == "linux_distribution"
        assert names.index("windows") < names.index("linux")
        assert [rule.name for rule in DEVICE_TYPE_RULES][0] == "mobile_browser"

    def test_blank_to_missing(self):
        result = _blank_to_missing(pd.Series(["Computer", "", "  ", None], dtype="string"))
        assert result.iloc[0] == "Computer"
        assert result.iloc[1:].isna().all()


def test_classify_features_does_not_mutate_input():
    df = pd.DataFrame({"os": ["iOS"], "device": ["iPhone"], "browser": ["Mobile Safari"]})
    before = df.copy()
    out = classify_features(df)

    pd.testing.assert_frame_equal(df, before)
    assert {"os_type", "device_brand", "device_type"} <= set(out.columns)
