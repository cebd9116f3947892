"""Excel timetable generator from schedule JSON data."""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import DAYS, TIME_SLOTS
from .exporter import load_schedule_json

# Days in order
DAYS_ORDER = [day.value for day in DAYS]

UNSCHEDULED_SHEET = "Unscheduled"

# Column widths
TIME_COLUMN_WIDTH = 16.0
DAY_COLUMN_WIDTH = 28.0

# Fonts
FONT_TITLE = Font(name="Calibri", size=14, bold=True)
FONT_HEADER = Font(name="Calibri", size=11, bold=True)
FONT_TIME = Font(name="Calibri", size=10, bold=False)
FONT_CELL = Font(name="Calibri", size=10, bold=False)

# Alignments
ALIGN_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
ALIGN_LEFT = Alignment(horizontal="left", vertical="center", wrap_text=True)

# Borders
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

FILL_HEADER = PatternFill(fill_type="solid", start_color="DDEBF7", end_color="DDEBF7")

# First row of the day/time grid (row 1 is the title, row 2 is blank)
HEADER_ROW = 3


class ScheduleExcelGenerator:
    """Generates a workbook with one weekly grid per classroom.

    Rows are time slots, columns are days, each filled cell names the course
    section held there. Unscheduled sections get their own sheet.
    """

    @staticmethod
    def sanitize_sheet_name(name: str) -> str:
        """Sanitize sheet name by removing invalid characters.

        Excel sheet names cannot contain: / \\ * ? : [ ]

        Args:
            name: Original sheet name.

        Returns:
            Sanitized sheet name (max 31 chars).
        """
        invalid_chars = r"/\*?:[]"
        for char in invalid_chars:
            name = name.replace(char, "")
        return name[:31] or "Sheet"

    def build_classroom_grids(
        self, assignments: list[dict]
    ) -> dict[str, tuple[str, dict[int, dict[str, dict]]]]:
        """Group assignments by classroom id.

        Returns:
            {classroom_id: (label, {slot_id: {day: assignment}})}, ordered by
            label and then id. Rooms sharing a label stay separate.
        """
        grids: dict[str, tuple[str, dict[int, dict[str, dict]]]] = {}
        for assignment in assignments:
            classroom_id = assignment["classroom_id"]
            label = assignment.get("classroom") or classroom_id
            _, grid = grids.setdefault(classroom_id, (label, {}))
            grid.setdefault(assignment["time_slot_id"], {})[assignment["day"]] = assignment
        return dict(sorted(grids.items(), key=lambda item: (item[1][0], item[0])))

    def format_cell_content(self, assignment: dict) -> str:
        """Format assignment for cell display.

        Args:
            assignment: Assignment dictionary.

        Returns:
            Formatted multi-line string for cell.
        """
        title = assignment.get("course_code") or assignment["section_id"]
        if assignment.get("section_number"):
            title = f"{title} ({assignment['section_number']})"
        lines = [title]
        if assignment.get("course_name"):
            lines.append(assignment["course_name"])
        lines.append(assignment.get("instructor", "TBA"))
        return "\n".join(lines)

    def create_workbook(self, data: dict) -> Workbook:
        """Create Excel workbook with schedule.

        Args:
            data: Schedule result dictionary (ScheduleResult.to_dict()).

        Returns:
            Populated Workbook object.
        """
        wb = Workbook()
        wb.remove(wb.active)

        title = f"{data.get('semester', '')} {data.get('year', '')}".strip()
        used_names: set[str] = set()

        grids = self.build_classroom_grids(data.get("assignments", []))
        for label, grid in grids.values():
            sheet_name = self.sanitize_sheet_name(label)
            suffix = 2
            while sheet_name in used_names:
                sheet_name = self.sanitize_sheet_name(f"{label[:27]} {suffix}")
                suffix += 1
            used_names.add(sheet_name)

            ws = wb.create_sheet(title=sheet_name)
            self.setup_sheet(ws, f"{label} - {title}" if title else label)
            self.fill_grid(ws, grid)

        unassigned = data.get("unassigned", [])
        if unassigned:
            self.add_unscheduled_sheet(wb, unassigned)

        # openpyxl requires at least one sheet
        if not wb.worksheets:
            wb.create_sheet(title="Empty")

        return wb

    def setup_sheet(self, ws, title: str) -> None:
        """Write title, day headers, time column and borders."""
        ws["A1"] = title
        ws["A1"].font = FONT_TITLE
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(DAYS_ORDER) + 1)

        ws.column_dimensions["A"].width = TIME_COLUMN_WIDTH
        header = ws.cell(row=HEADER_ROW, column=1, value="Time")
        header.font = FONT_HEADER
        header.alignment = ALIGN_CENTER
        header.border = THIN_BORDER
        header.fill = FILL_HEADER

        for col, day in enumerate(DAYS_ORDER, start=2):
            ws.column_dimensions[get_column_letter(col)].width = DAY_COLUMN_WIDTH
            cell = ws.cell(row=HEADER_ROW, column=col, value=day)
            cell.font = FONT_HEADER
            cell.alignment = ALIGN_CENTER
            cell.border = THIN_BORDER
            cell.fill = FILL_HEADER

        for row, slot in enumerate(TIME_SLOTS, start=HEADER_ROW + 1):
            ws.row_dimensions[row].height = 45.0
            cell = ws.cell(row=row, column=1, value=slot.label)
            cell.font = FONT_TIME
            cell.alignment = ALIGN_CENTER
            cell.border = THIN_BORDER
            for col in range(2, len(DAYS_ORDER) + 2):
                ws.cell(row=row, column=col).border = THIN_BORDER

    def fill_grid(self, ws, grid: dict[int, dict[str, dict]]) -> None:
        """Fill the day/time grid of one classroom."""
        slot_rows = {slot.id: row for row, slot in enumerate(TIME_SLOTS, start=HEADER_ROW + 1)}
        day_cols = {day: col for col, day in enumerate(DAYS_ORDER, start=2)}

        for slot_id, by_day in grid.items():
            row = slot_rows.get(slot_id)
            if row is None:
                continue
            for day, assignment in by_day.items():
                col = day_cols.get(day)
                if col is None:
                    continue
                cell = ws.cell(row=row, column=col, value=self.format_cell_content(assignment))
                cell.font = FONT_CELL
                cell.alignment = ALIGN_CENTER

    def add_unscheduled_sheet(self, wb: Workbook, unassigned: list[dict]) -> None:
        """List sections that could not be scheduled."""
        ws = wb.create_sheet(title=UNSCHEDULED_SHEET)
        headers = ["Section", "Course", "Name", "Reason"]
        widths = [14.0, 14.0, 36.0, 60.0]
        for col, (name, width) in enumerate(zip(headers, widths), start=1):
            ws.column_dimensions[get_column_letter(col)].width = width
            cell = ws.cell(row=1, column=col, value=name)
            cell.font = FONT_HEADER
            cell.fill = FILL_HEADER
            cell.border = THIN_BORDER

        for row, item in enumerate(unassigned, start=2):
            values = [
                item.get("section_id", ""),
                item.get("course_code", ""),
                item.get("course_name", ""),
                item.get("reason", ""),
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.font = FONT_CELL
                cell.alignment = ALIGN_LEFT
                cell.border = THIN_BORDER


def generate_schedule_excel(input_path: Path, output_path: Path) -> Path:
    """Generate an Excel timetable from a schedule JSON file.

    Args:
        input_path: Schedule JSON written by export_schedule_json.
        output_path: Target .xlsx file.

    Returns:
        Path of the written workbook.
    """
    generator = ScheduleExcelGenerator()
    data = load_schedule_json(input_path)
    wb = generator.create_workbook(data)

    output = Path(output_path)
    if output.suffix != ".xlsx":
        output = output.with_suffix(".xlsx")
    output.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output)
    return output
