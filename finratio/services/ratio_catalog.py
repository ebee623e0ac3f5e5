"""Ratio catalog: default definitions, idempotent install and active-ratio loading.

Ratios are stored as rows (``Ratio`` + ``RatioComponent``) so they can be
edited or soft-deleted without a deploy. The evaluation pipeline never works on
ORM rows directly: ``load_active_ratios`` snapshots them into frozen
dataclasses that already carry each component's account nature.
"""

from dataclasses import dataclass, field

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from finratio.core.exceptions import CatalogError
from finratio.models.category import AccountNature, AccountType, Category, Subcategory
from finratio.models.ratio import Ratio, RatioComponent, RatioPolicy, Side

logger = structlog.get_logger()


# ── Default hierarchy ─────────────────────────────
# account type -> category -> subcategories
DEFAULT_HIERARCHY: dict[str, dict[str, list[str]]] = {
    "Aset": {
        "Kas": ["Uang Tunai", "Uang Rekening Bank", "Uang E-Wallet"],
        "Piutang": ["Piutang"],
        "Bangunan": ["Rumah", "Apartemen", "Ruko", "Gudang", "Kios"],
        "Tanah": ["Properti Sewa"],
        "Peralatan": ["Kendaraan", "Elektronik", "Furnitur"],
        "Surat Berharga": ["Saham", "Obligasi", "Reksadana"],
        "Investasi Alternatif": ["Kripto"],
        "Aset Pribadi": ["Koleksi", "Perhiasan"],
    },
    "Liabilitas": {
        "Utang": ["Saldo Kartu Kredit", "Tagihan", "Cicilan", "Pajak"],
        "Utang Wesel": ["Pinjaman"],
        "Utang Hipotek": ["Pinjaman Properti"],
    },
    "Pemasukan": {
        "Pendapatan dari Pekerjaan": ["Gaji", "Upah", "Bonus", "Commission"],
        "Pendapatan dari Investasi": ["Dividen"],
        "Pendapatan Bunga": ["Bunga"],
        "Keuntungan dari Aset": ["Untung Modal"],
        "Pendapatan Jasa": ["Freelance"],
    },
    "Pengeluaran": {
        "Tabungan": ["Tabungan"],
        "Makanan & Minuman": ["Makanan", "Minuman"],
        "Hadiah & Donasi": ["Hadiah", "Donasi"],
        "Transportasi": ["Kendaraan Pribadi", "Transportasi Umum", "Bahan bakar"],
        "Kesehatan & Medis": ["Kesehatan", "Medis"],
        "Perawatan Pribadi & Pakaian": ["Perawatan Pribadi", "Pakaian"],
        "Hiburan & Rekreasi": ["Hiburan", "Rekreasi"],
        "Pendidikan & Pembelajaran": ["Pendidikan", "Pembelajaran"],
        "Kewajiban Finansial": ["Bayar pinjaman", "Bayar pajak", "Bayar asuransi"],
        "Perumahan & Kebutuhan": ["Perumahan", "Kebutuhan Sehari-hari"],
    },
    "Ekuitas": {
        "Ekuitas": ["Ekuitas"],
    },
}


# ── Conceptual subcategory groups ─────────────────
# A subcategory may belong to several groups (e.g. Saham is both non-liquid
# and invested).
SUBCATEGORY_GROUPS: dict[str, list[str]] = {
    "liquid": ["Uang Tunai", "Uang Rekening Bank", "Uang E-Wallet", "Dividen", "Bunga", "Untung Modal"],
    "nonLiquid": [
        "Piutang", "Rumah", "Apartemen", "Ruko", "Gudang", "Kios", "Properti Sewa", "Kendaraan",
        "Elektronik", "Furnitur", "Saham", "Obligasi", "Reksadana", "Kripto", "Koleksi", "Perhiasan",
    ],
    "liabilities": ["Saldo Kartu Kredit", "Tagihan", "Cicilan", "Pajak", "Pinjaman", "Pinjaman Properti"],
    "expense": [
        "Tabungan", "Makanan", "Minuman", "Hadiah", "Donasi", "Kendaraan Pribadi", "Transportasi Umum",
        "Bahan bakar", "Kesehatan", "Medis", "Perawatan Pribadi", "Pakaian", "Hiburan", "Rekreasi",
        "Pendidikan", "Pembelajaran", "Bayar pinjaman", "Bayar pajak", "Bayar asuransi", "Perumahan",
        "Kebutuhan Sehari-hari",
    ],
    "income": ["Gaji", "Upah", "Bonus", "Commission", "Dividen", "Bunga", "Untung Modal", "Freelance"],
    "savings": ["Tabungan"],
    "debtPayments": ["Cicilan", "Saldo Kartu Kredit", "Pinjaman", "Pinjaman Properti", "Bayar pinjaman"],
    "deductions": ["Pajak", "Bayar asuransi"],
    "invested": ["Saham", "Obligasi", "Reksadana", "Kripto", "Properti Sewa"],
}


def _terms(side: Side, sign: int, *groups: str) -> list[tuple[str, Side, int]]:
    return [(name, side, sign) for group in groups for name in SUBCATEGORY_GROUPS[group]]


NUM, DEN = Side.NUMERATOR, Side.DENOMINATOR


def _net_worth(side: Side) -> list[tuple[str, Side, int]]:
    """Net worth = liquid + non-liquid - liabilities."""
    return _terms(side, 1, "liquid", "nonLiquid") + _terms(side, -1, "liabilities")


DEFAULT_RATIOS: list[dict] = [
    {
        "code": "LIQUIDITY_RATIO",
        "title": "Rasio Likuiditas",
        "multiplier": 1,  # months of expenses covered
        "lower_bound": 3,
        "policy": RatioPolicy.LIQUIDITY,
        "components": _terms(NUM, 1, "liquid") + _terms(DEN, 1, "expense"),
    },
    {
        "code": "LIQUID_ASSETS_TO_NET_WORTH_RATIO",
        "title": "Rasio aset lancar terhadap kekayaan bersih",
        "multiplier": 100,
        "lower_bound": 15,
        "components": _terms(NUM, 1, "liquid") + _net_worth(DEN),
    },
    {
        "code": "DEBT_TO_ASSET_RATIO",
        "title": "Rasio utang terhadap aset",
        "multiplier": 100,
        "upper_bound": 50,
        "components": _terms(NUM, 1, "liabilities") + _terms(DEN, 1, "liquid", "nonLiquid"),
    },
    {
        "code": "SAVING_RATIO",
        "title": "Rasio Tabungan",
        "multiplier": 100,
        "lower_bound": 10,
        "components": _terms(NUM, 1, "savings") + _terms(DEN, 1, "income"),
    },
    {
        "code": "DEBT_SERVICE_RATIO",
        "title": "Rasio kemampuan pelunasan hutang",
        "multiplier": 100,
        "upper_bound": 45,
        "components": _terms(NUM, 1, "debtPayments") + _terms(DEN, 1, "income") + _terms(DEN, -1, "deductions"),
    },
    {
        "code": "INVESTMENT_ASSETS_TO_NET_WORTH_RATIO",
        "title": "Aset investasi terhadap nilai bersih kekayaan",
        "multiplier": 100,
        "lower_bound": 50,
        "components": _terms(NUM, 1, "invested") + _net_worth(DEN),
    },
    {
        "code": "SOLVENCY_RATIO",
        "title": "Rasio solvabilitas",
        "multiplier": 100,
        "lower_bound": 0,
        "is_lower_bound_inclusive": False,  # net worth must be positive
        "policy": RatioPolicy.SOLVENCY,
        "components": _net_worth(NUM) + _terms(DEN, 1, "liquid", "nonLiquid"),
    },
]


# ── Snapshots handed to the evaluation pipeline ───


@dataclass(frozen=True)
class ComponentDefinition:
    subcategory_id: int
    subcategory_name: str
    side: Side
    sign: int
    nature: AccountNature


@dataclass(frozen=True)
class RatioDefinition:
    id: int
    code: str
    title: str
    multiplier: float
    lower_bound: float | None
    upper_bound: float | None
    is_lower_bound_inclusive: bool
    is_upper_bound_inclusive: bool
    ideal_text: str | None
    policy: RatioPolicy
    components: tuple[ComponentDefinition, ...] = field(default_factory=tuple)

    def side(self, side: Side) -> list[ComponentDefinition]:
        return [c for c in self.components if c.side == side]


def _snapshot(ratio: Ratio) -> RatioDefinition:
    """Freeze a loaded Ratio, keeping only components on a live hierarchy path."""
    components = tuple(
        ComponentDefinition(
            subcategory_id=comp.subcategory_id,
            subcategory_name=comp.subcategory.name,
            side=comp.side,
            sign=comp.sign,
            nature=comp.subcategory.category.account_type.nature,
        )
        for comp in ratio.components
        if comp.deleted_at is None and comp.subcategory.is_active
    )
    return RatioDefinition(
        id=ratio.id,
        code=ratio.code,
        title=ratio.title,
        multiplier=ratio.multiplier,
        lower_bound=ratio.lower_bound,
        upper_bound=ratio.upper_bound,
        is_lower_bound_inclusive=ratio.is_lower_bound_inclusive,
        is_upper_bound_inclusive=ratio.is_upper_bound_inclusive,
        ideal_text=ratio.ideal_text,
        policy=ratio.policy,
        components=components,
    )


class RatioCatalogService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _ratio_query(self):
        return (
            select(Ratio)
            .where(Ratio.deleted_at.is_(None))
            .options(
                selectinload(Ratio.components)
                .selectinload(RatioComponent.subcategory)
                .selectinload(Subcategory.category)
                .selectinload(Category.account_type)
            )
        )

    async def load_active_ratios(self) -> list[RatioDefinition]:
        """Active ratios that can be evaluated, ordered by id.

        A ratio left without any live component cannot produce a meaningful
        fraction and is skipped with a warning. LIQUIDITY is kept regardless:
        it degrades to 0 rather than to an undefined value.
        """
        result = await self.db.execute(self._ratio_query().order_by(Ratio.id))
        definitions = []
        for ratio in result.scalars().all():
            definition = _snapshot(ratio)
            if not definition.components and definition.policy is not RatioPolicy.LIQUIDITY:
                logger.warning("Ratio has no active components, skipping", ratio=ratio.code)
                continue
            definitions.append(definition)
        return definitions

    async def load_ratio(self, ratio_id: int) -> RatioDefinition | None:
        """Snapshot of a single active ratio, or None if it is missing or deleted."""
        result = await self.db.execute(self._ratio_query().where(Ratio.id == ratio_id))
        ratio = result.scalar_one_or_none()
        return _snapshot(ratio) if ratio else None

    async def install_defaults(self) -> list[Ratio]:
        """Create the default hierarchy and ratios; safe to run repeatedly.

        Existing rows are matched by name (hierarchy) and code (ratios). Ratio
        attributes are refreshed from the defaults; components are added when
        missing and never removed.
        """
        subcategory_ids = await self._install_hierarchy()

        ratios = []
        for ratio_def in DEFAULT_RATIOS:
            ratio = await self._upsert_ratio(ratio_def)
            await self._install_components(ratio, ratio_def["components"], subcategory_ids)
            ratios.append(ratio)

        await self.db.flush()
        logger.info("Ratio catalog installed", ratios=len(ratios), subcategories=len(subcategory_ids))
        return ratios

    async def _install_hierarchy(self) -> dict[str, int]:
        """Ensure every default node exists; return subcategory name -> id."""
        subcategory_ids: dict[str, int] = {}
        for type_name, categories in DEFAULT_HIERARCHY.items():
            account_type = await self._get_or_create(AccountType, name=type_name)
            for cat_name, sub_names in categories.items():
                category = await self._get_or_create(Category, account_type_id=account_type.id, name=cat_name)
                for sub_name in sub_names:
                    sub = await self._get_or_create(Subcategory, category_id=category.id, name=sub_name)
                    subcategory_ids[sub_name] = sub.id
        return subcategory_ids

    async def _upsert_ratio(self, ratio_def: dict) -> Ratio:
        attrs = {
            "title": ratio_def["title"],
            "multiplier": ratio_def.get("multiplier", 1),
            "lower_bound": ratio_def.get("lower_bound"),
            "upper_bound": ratio_def.get("upper_bound"),
            "is_lower_bound_inclusive": ratio_def.get("is_lower_bound_inclusive", True),
            "is_upper_bound_inclusive": ratio_def.get("is_upper_bound_inclusive", True),
            "ideal_text": ratio_def.get("ideal_text"),
            "policy": ratio_def.get("policy", RatioPolicy.STANDARD),
        }
        result = await self.db.execute(select(Ratio).where(Ratio.code == ratio_def["code"]))
        ratio = result.scalar_one_or_none()
        if ratio is None:
            ratio = Ratio(code=ratio_def["code"], **attrs)
            self.db.add(ratio)
        else:
            for key, value in attrs.items():
                setattr(ratio, key, value)
        await self.db.flush()
        return ratio

    async def _install_components(
        self,
        ratio: Ratio,
        components: list[tuple[str, Side, int]],
        subcategory_ids: dict[str, int],
    ) -> None:
        result = await self.db.execute(
            select(RatioComponent).where(RatioComponent.ratio_id == ratio.id)
        )
        existing = {(c.subcategory_id, c.side): c for c in result.scalars().all()}

        for sub_name, side, sign in components:
            subcategory_id = subcategory_ids.get(sub_name)
            if subcategory_id is None:
                raise CatalogError(f"Subcategory {sub_name!r} used by {ratio.code} is not in the hierarchy")
            component = existing.get((subcategory_id, side))
            if component is None:
                self.db.add(RatioComponent(ratio_id=ratio.id, subcategory_id=subcategory_id, side=side, sign=sign))
            else:
                component.sign = sign
        await self.db.flush()

    async def _get_or_create(self, model, **filters):
        result = await self.db.execute(select(model).filter_by(**filters))
        obj = result.scalar_one_or_none()
        if obj is None:
            obj = model(**filters)
            self.db.add(obj)
            await self.db.flush()
        return obj
