# utils/strategic_performance/export.py
"""
Formatted Excel Export for Strategic Performance

Creates Excel reports with:
- Summary sheet (reference period, semaphore counts)
- Results sheet for the selected month, semaphore-coloured
- Monthly sheet: twelve Meta / Realizado / % groups per indicator
- Indicator catalog (summary or detailed) as a separate workbook

Uses openpyxl for formatting capabilities.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import Dict, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from .constants import (
    CALC_MODE_LABELS,
    EXCEL_STYLES,
    MONTH_ORDER,
    MONTHS_IN_YEAR,
    NO_DATA_DISPLAY,
    POLARITY_LABELS,
    STATUS_LABELS,
    TIER_ORDER,
    TIER_STYLES,
)
from .formatting import format_month
from .models import Goal, StrategicData
from .report import PerformanceReport

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class StrategicExport:
    """
    Excel report generator for strategic performance.

    Usage:
        exporter = StrategicExport()
        excel_bytes = exporter.create_performance_report(
            data=data,
            year=2025,
            month_index=5
        )

        st.download_button(
            label="Download Report",
            data=excel_bytes,
            file_name="resultados_2025.xlsx",
            mime=XLSX_MIME
        )
    """

    def __init__(self, number_locale: Optional[str] = None):
        """Initialize with default styles."""
        self.wb = None
        self.number_locale = number_locale
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.subheader_fill = PatternFill(
            start_color=EXCEL_STYLES['subheader_fill_color'],
            end_color=EXCEL_STYLES['subheader_fill_color'],
            fill_type='solid'
        )
        self.tier_fills = {
            tier: PatternFill(start_color=style['fill'], end_color=style['fill'], fill_type='solid')
            for tier, style in TIER_STYLES.items()
        }

        self.header_font = Font(
            bold=True,
            color=EXCEL_STYLES['header_font_color'],
            size=11
        )
        self.title_font = Font(bold=True, size=16)
        self.subtitle_font = Font(bold=True, size=12)

        thin_border = Side(style='thin', color='000000')
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border
        )

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.right_align = Alignment(horizontal='right', vertical='center')
        self.wrap_align = Alignment(vertical='top', wrap_text=True)

        self.number_format = EXCEL_STYLES['number_format']
        self.percent_format = EXCEL_STYLES['percent_format']

    # =========================================================================
    # MAIN EXPORT METHODS
    # =========================================================================

    def create_performance_report(
        self,
        data: StrategicData,
        year: int,
        month_index: int,
        perspective_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        use_custom_rules: bool = False
    ) -> BytesIO:
        """
        Create performance workbook with Resumo / Resultados / Mensal sheets.

        Args:
            data: Strategic document
            year: Goal year
            month_index: Selected reporting month (0-based)
            perspective_id: Optional perspective filter
            manager_id: Optional manager filter
            use_custom_rules: Classify with configured semaphore rules

        Returns:
            BytesIO containing Excel file
        """
        report = PerformanceReport(data, number_locale=self.number_locale)
        results_df = report.build_results_table(
            year, month_index, perspective_id, manager_id, use_custom_rules
        )
        monthly_df = report.build_monthly_matrix(
            year, perspective_id, manager_id, use_custom_rules
        )

        self.wb = Workbook()
        self._create_cover_sheet(data, year, month_index, report.summarize_tiers(results_df))
        self._create_results_sheet(results_df)
        self._create_monthly_sheet(monthly_df)

        logger.info(f"Excel performance report created ({len(results_df)} indicators)")
        return self._save()

    def create_indicator_catalog(
        self,
        data: StrategicData,
        mode: str = "summary",
        year: Optional[int] = None
    ) -> BytesIO:
        """
        Create indicator catalog workbook.

        Args:
            data: Strategic document
            mode: 'summary' (identification columns) or 'detailed'
                (definition fields plus the twelve monthly targets)
            year: Goal year for the monthly targets (latest year when None)

        Returns:
            BytesIO containing Excel file
        """
        if mode not in ("summary", "detailed"):
            raise ValueError(f"Unknown catalog mode: {mode!r}")

        self.wb = Workbook()
        ws = self.wb.active
        ws.title = "Indicadores"

        columns = [
            ('Perspectiva', 25),
            ('Objetivo Estratégico', 35),
            ('Indicador', 35),
            ('Gestor', 20),
            ('Status', 12),
        ]
        if mode == "detailed":
            columns += [
                ('Descrição', 40),
                ('Fórmula', 30),
                ('Unidade', 10),
                ('Fonte', 20),
                ('Periodicidade', 14),
                ('Polaridade', 20),
                ('Tipo Cálculo', 18),
            ]
            columns += [(f"Meta {month}", 10) for month in MONTH_ORDER]

        self._write_header_row(ws, 1, [(header, width) for header, width in columns])

        report = PerformanceReport(data)
        for row_idx, indicator in enumerate(report.filter_indicators(), 2):
            values = [
                data.perspective_name(indicator.perspective_id),
                data.objective_name(indicator.objective_id),
                indicator.name,
                data.manager_name(indicator.manager_id),
                STATUS_LABELS.get(indicator.status, indicator.status),
            ]
            if mode == "detailed":
                values += [
                    indicator.description,
                    indicator.formula,
                    indicator.unit,
                    indicator.source,
                    indicator.periodicity,
                    POLARITY_LABELS[indicator.polarity.value],
                    CALC_MODE_LABELS[indicator.calc_mode.value],
                ]
                goal = self._catalog_goal(data, indicator.id, year)
                values += [
                    goal.planned.get(m) if goal is not None else None
                    for m in range(MONTHS_IN_YEAR)
                ]

            for col_idx, value in enumerate(values, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border
                if isinstance(value, float):
                    cell.number_format = self.number_format

        ws.freeze_panes = 'A2'

        logger.info(f"Excel indicator catalog created ({mode}, {len(data.indicators)} indicators)")
        return self._save()

    def _save(self) -> BytesIO:
        # Remove default empty sheet if exists
        if 'Sheet' in self.wb.sheetnames and len(self.wb.sheetnames) > 1:
            del self.wb['Sheet']

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)
        return output

    @staticmethod
    def _catalog_goal(data: StrategicData, indicator_id: str, year: Optional[int]) -> Optional[Goal]:
        if year is not None:
            return data.find_goal(indicator_id, year)
        goals = [g for g in data.goals if g.indicator_id == indicator_id]
        return max(goals, key=lambda g: g.year) if goals else None

    # =========================================================================
    # COVER SHEET
    # =========================================================================

    def _create_cover_sheet(
        self,
        data: StrategicData,
        year: int,
        month_index: int,
        tier_counts: Dict[str, int]
    ):
        """Create cover page with semaphore summary."""
        ws = self.wb.active
        ws.title = "Resumo"

        row = 1
        ws.cell(row=row, column=1, value="Relatório de Resultados Estratégicos")
        ws.cell(row=row, column=1).font = self.title_font
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=4)
        row += 2

        info_rows = [
            ("Empresa:", data.company_name or NO_DATA_DISPLAY),
            ("Ano:", year),
            ("Mês de referência:", format_month(month_index, full=True)),
            ("Gerado em:", datetime.now().strftime('%Y-%m-%d %H:%M')),
        ]
        for label, value in info_rows:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
            row += 1
        row += 1

        ws.cell(row=row, column=1, value="Semáforo")
        ws.cell(row=row, column=1).font = self.subtitle_font
        row += 1

        for tier in TIER_ORDER:
            label_cell = ws.cell(row=row, column=1, value=TIER_STYLES[tier]['label'])
            label_cell.fill = self.tier_fills[tier]
            label_cell.border = self.cell_border
            count_cell = ws.cell(row=row, column=2, value=tier_counts.get(tier, 0))
            count_cell.alignment = self.right_align
            count_cell.border = self.cell_border
            row += 1

        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 20

    # =========================================================================
    # RESULTS SHEET
    # =========================================================================

    def _create_results_sheet(self, df: pd.DataFrame):
        """Create selected-month results sheet."""
        ws = self.wb.create_sheet("Resultados")

        columns = [
            ('perspective', 'Perspectiva', 25),
            ('objective', 'Objetivo', 35),
            ('indicator', 'Indicador', 35),
            ('manager', 'Gestor', 20),
            ('unit', 'Unidade', 10),
            ('calc_mode', 'Cálculo', 18),
            ('target', 'Meta', 14),
            ('realized', 'Realizado', 14),
            ('percentage', '%', 10),
            ('tier_label', 'Semáforo', 12),
        ]
        self._write_header_row(ws, 1, [(header, width) for _, header, width in columns])

        for row_idx, row_data in enumerate(df.itertuples(index=False), 2):
            for col_idx, (col_name, _, _) in enumerate(columns, 1):
                value = getattr(row_data, col_name)
                if col_name in ('target', 'realized', 'percentage') and not row_data.valid:
                    value = NO_DATA_DISPLAY

                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border

                if col_name in ('target', 'realized'):
                    cell.number_format = self.number_format
                    cell.alignment = self.right_align
                elif col_name == 'percentage':
                    cell.number_format = self.percent_format
                    cell.alignment = self.right_align
                    cell.fill = self.tier_fills[row_data.tier]
                elif col_name == 'tier_label':
                    cell.fill = self.tier_fills[row_data.tier]
                    cell.alignment = self.center_align

        ws.freeze_panes = 'A2'

    # =========================================================================
    # MONTHLY SHEET
    # =========================================================================

    def _create_monthly_sheet(self, df: pd.DataFrame):
        """Create twelve-month sheet with Meta / Realizado / % per month."""
        ws = self.wb.create_sheet("Mensal")

        fixed = [('Perspectiva', 25), ('Objetivo', 35), ('Indicador', 35)]
        for col_idx, (header, width) in enumerate(fixed, 1):
            ws.merge_cells(start_row=1, start_column=col_idx, end_row=2, end_column=col_idx)
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        first_month_col = len(fixed) + 1
        for month_index in range(MONTHS_IN_YEAR):
            start_col = first_month_col + month_index * 3
            ws.merge_cells(start_row=1, start_column=start_col, end_row=1, end_column=start_col + 2)
            cell = ws.cell(row=1, column=start_col, value=MONTH_ORDER[month_index])
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align

            for offset, header in enumerate(('Meta', 'Realizado', '%')):
                sub = ws.cell(row=2, column=start_col + offset, value=header)
                sub.fill = self.subheader_fill
                sub.font = Font(bold=True)
                sub.alignment = self.center_align
                sub.border = self.cell_border
                ws.column_dimensions[get_column_letter(start_col + offset)].width = 11

        if df.empty:
            ws.freeze_panes = ws.cell(row=3, column=first_month_col)
            return

        row_idx = 3
        for _, rows in df.groupby('position', sort=False):
            first = rows.iloc[0]
            for col_idx, value in enumerate((first['perspective'], first['objective'], first['indicator']), 1):
                ws.cell(row=row_idx, column=col_idx, value=value).border = self.cell_border

            for result in rows.itertuples(index=False):
                start_col = first_month_col + int(result.month_index) * 3
                if result.valid:
                    triple = (result.target, result.realized, result.percentage)
                else:
                    triple = (None, None, NO_DATA_DISPLAY)

                for offset, value in enumerate(triple):
                    cell = ws.cell(row=row_idx, column=start_col + offset, value=value)
                    cell.border = self.cell_border
                    cell.alignment = self.right_align
                    if offset < 2:
                        cell.number_format = self.number_format
                    else:
                        cell.number_format = self.percent_format
                        cell.fill = self.tier_fills[result.tier]
            row_idx += 1

        ws.freeze_panes = ws.cell(row=3, column=first_month_col)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _write_header_row(self, ws, row: int, columns):
        for col_idx, (header, width) in enumerate(columns, 1):
            cell = ws.cell(row=row, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            cell.border = self.cell_border
            ws.column_dimensions[get_column_letter(col_idx)].width = width
