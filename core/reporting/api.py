"""Reporting API wrappers around renderer classes."""

from datetime import date
from pathlib import Path

from core.domain.enums import PeriodMode
from core.reporting.contexts import PeriodReportContext
from core.reporting.renderers.excel import PeriodExcelRenderer
from core.services.finance import FinanceService, build_category_analytics, build_period_cashflow


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def generate_period_excel_report(
    finance_service: FinanceService,
    user_id: int,
    output_path: str | Path,
    mode: PeriodMode | str = PeriodMode.MONTHLY,
    anchor: date | None = None,
) -> Path:
    anchor = anchor or date.today()
    stats = finance_service.get_period_stats(user_id, mode, anchor)
    ctx = PeriodReportContext(
        stats=stats,
        by_category=build_category_analytics(stats),
        cashflow=build_period_cashflow(stats),
        generated_on=date.today(),
    )
    return PeriodExcelRenderer().render(ctx, _ensure_parent(Path(output_path)))
