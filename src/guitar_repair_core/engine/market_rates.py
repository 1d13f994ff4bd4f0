"""
Market Rates - published reference price menu with keyword lookup
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .case_search import tokenize


@dataclass(frozen=True)
class MenuItem:
    name: str
    price_min: int
    price_max: int
    desc: str
    keywords: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "priceMin": self.price_min,
            "priceMax": self.price_max,
            "desc": self.desc,
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class MenuCategory:
    category: str
    items: Tuple[MenuItem, ...]


REPAIR_MENU = (
    MenuCategory("ナット交換 (Nut)", (
        MenuItem("牛骨 (Bone)", 8800, 13000, "最も一般的。バランスの良い音色。",
                 ("ナット", "nut", "牛骨", "開放弦", "ビビリ", "チューニング")),
        MenuItem("人工象牙 (TUSQ)", 11000, 11000, "高音域の倍音が豊か。",
                 ("tusq", "タスク", "ナット")),
        MenuItem("ブラス (真鍮)", 16500, 18700, "サステインが長く、煌びやか。",
                 ("ブラス", "真鍮", "メタル", "サステイン")),
        MenuItem("ロックナット加工", 16500, 22000, "フロイドローズ等の取り付け。",
                 ("ロックナット", "フロイド", "アーミング")),
    )),
    MenuCategory("フレット交換 (Refret)", (
        MenuItem("スタンダード (Rosewood/Ebony指板)", 38500, 58000, "一般的な指板。指板調整含む。",
                 ("フレット", "fret", "打ち替え", "減り", "凹み")),
        MenuItem("メイプル指板 (塗装あり)", 71500, 91000, "指板面の再塗装が必要なため高額。",
                 ("メイプル", "maple", "塗装")),
        MenuItem("バインディング付き", 43500, 69000, "セルバインディングの処理工賃含む。",
                 ("バインディング", "セル")),
        MenuItem("ステンレスフレット変更", 48500, 69000, "硬度が高く減りにくい。加工難易度高。",
                 ("ステンレス", "錆びない")),
    )),
    MenuCategory("ネック折れ (Neck Break)", (
        MenuItem("接着のみ (タッチアップ)", 22000, 33000, "強度は保証外。見た目も傷が残る可能性あり。",
                 ("折れ", "ひび", "割れ", "クラック", "倒した")),
        MenuItem("補強なし (オーバーコート)", 44000, 49500, "塗装で傷を目立たなくする。",
                 ("折れ", "補強なし")),
        MenuItem("補強あり (完全修復)", 66000, 100000, "ボリュート加工などで強度を高める。",
                 ("折れ", "補強", "ヘッド")),
    )),
    MenuCategory("全体調整 (Setup)", (
        MenuItem("基本セットアップ", 5000, 10000, "ネック調整、弦高、オクターブ、クリーニング。",
                 ("調整", "セットアップ", "弦高", "弾きにくい", "高い", "低い", "オクターブ")),
        MenuItem("すり合わせ (Fret Leveling)", 8000, 15000, "特定のビビリを除去。全体的なバランス調整。",
                 ("すり合わせ", "ビビリ", "詰まり", "音詰まり", "特定のポジション")),
    )),
    MenuCategory("電装系 (Electronics)", (
        MenuItem("ジャック交換", 2000, 4000, "ガリや接触不良の修理。",
                 ("ジャック", "ガリ", "ノイズ", "接触不良", "音が出ない", "途切れる")),
        MenuItem("PU交換 (1個)", 3000, 6000, "配線工賃のみ。パーツ代別。",
                 ("ピックアップ", "pu", "マイク", "交換")),
        MenuItem("全配線引き直し", 8000, 15000, "ポット、スイッチ等の交換含む場合あり。",
                 ("配線", "回路", "ポッド", "スイッチ", "セレクター", "トーン", "ボリューム")),
    )),
    MenuCategory("ブリッジ周辺 (Bridge)", (
        MenuItem("ブリッジ剥がれ接着", 15000, 30000, "アコースティックギターの定番修理。",
                 ("ブリッジ", "浮き", "剥がれ", "隙間", "紙が入る")),
        MenuItem("サドル作成 (牛骨)", 5000, 8000, "弦高調整に合わせて新規作成。",
                 ("サドル", "弦高")),
    )),
)


def keyword_hits(item: MenuItem, tokens: List[str]) -> int:
    """Count keywords that contain, or are contained in, any query token."""
    needles = [t.lower() for t in tokens]
    hits = 0
    for keyword in item.keywords:
        kw = keyword.lower()
        if any(kw in n or n in kw for n in needles):
            hits += 1
    return hits


def full_menu() -> List[Dict[str, Any]]:
    return [
        dict(item.to_dict(), category=category.category)
        for category in REPAIR_MENU
        for item in category.items
    ]


def lookup(query: str) -> List[Dict[str, Any]]:
    """
    Match menu items against a free-text query.

    Blank queries return the whole menu without scores. Otherwise only
    matching items, each with its ``hits`` count, most hits first.
    """
    tokens = tokenize(query)
    if not tokens:
        return full_menu()

    matches = []
    for category in REPAIR_MENU:
        for item in category.items:
            hits = keyword_hits(item, tokens)
            if hits:
                entry = item.to_dict()
                entry["category"] = category.category
                entry["hits"] = hits
                matches.append(entry)
    matches.sort(key=lambda m: m["hits"], reverse=True)
    return matches
