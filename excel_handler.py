"""
Excel Handler for Leaderboard Export
Writes leaderboards, settlements and multi-day standings to an Excel workbook
"""

import logging
import os

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

import config

logger = logging.getLogger(__name__)

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")


class ExcelHandler:
    def __init__(self, file_path=config.EXCEL_OUTPUT_PATH):
        self.file_path = file_path
        self.workbook = None

    def load_or_create_workbook(self):
        """Load existing workbook or create a new empty one"""
        if os.path.exists(self.file_path):
            self.workbook = load_workbook(self.file_path)
        else:
            self.workbook = Workbook()
            # Drop the default sheet; every sheet is written by name
            self.workbook.remove(self.workbook.active)
        return self.workbook

    def _sheet(self, title, headers, widths):
        """Replace the named sheet with a fresh one carrying a styled header row"""
        if not self.workbook:
            self.load_or_create_workbook()

        if title in self.workbook.sheetnames:
            self.workbook.remove(self.workbook[title])
        ws = self.workbook.create_sheet(title)

        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal='center', vertical='center')
            ws.column_dimensions[get_column_letter(col)].width = widths[col - 1]
        return ws

    def _write_rows(self, ws, rows):
        for r, row_data in enumerate(rows, start=2):
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=r, column=col, value=value)
                cell.alignment = Alignment(horizontal='left', vertical='center')
        return len(rows)

    def write_leaderboard(self, result, title='Leaderboard'):
        """
        Write one row per player: totals, handicap and gross score per hole.
        result: dict returned by leaderboard.calculate_leaderboard
        """
        players = result['players']
        hole_numbers = [hs['hole'] for hs in players[0]['hole_scores']] if players else []
        ranked_ids = [
            e['player']['id'] for e in result['leaderboard'] if 'player' in e
        ] or [ps['player']['id'] for ps in players]
        order = {pid: i for i, pid in enumerate(ranked_ids)}

        headers = ['Pos', 'Player', 'Team', 'Index', 'Course HC', 'Playing HC',
                   'Thru', 'Gross', 'Net', 'To Par', 'Greenies'] + [str(n) for n in hole_numbers]
        widths = [6, 20, 8, 8, 10, 10, 6, 8, 8, 8, 9] + [5] * len(hole_numbers)
        ws = self._sheet(title, headers, widths)

        rows = []
        for ps in sorted(players, key=lambda p: order.get(p['player']['id'], len(order))):
            player = ps['player']
            rows.append([
                order.get(player['id'], len(order)) + 1,
                player['name'],
                player['team'],
                player['handicap_index'],
                player['course_handicap'],
                player['display_handicap'],
                ps['holes_played'],
                ps['gross_total'],
                ps['net_total'],
                ps['to_par'],
                ps['greenies_won'],
            ] + [hs['gross'] for hs in ps['hole_scores']])

        added = self._write_rows(ws, rows)
        logger.debug("Wrote %s leaderboard rows to sheet %s", added, title)
        return added

    def write_settlements(self, settlements, title='Settlements'):
        ws = self._sheet(title, ['From', 'To', 'Amount', 'Reason'], [20, 20, 10, 30])
        return self._write_rows(ws, [[s['from'], s['to'], s['amount'], s['reason']] for s in settlements])

    def write_multi_day_standings(self, standings, title='Overall'):
        ws = self._sheet(
            title,
            ['Pos', 'Player', 'Points', 'Wins', 'Strokes', 'Rounds', 'Payout'],
            [6, 20, 8, 6, 8, 8, 10],
        )
        rows = [
            [s['position'], s['player_name'], s['total_points'], s['wins'],
             s['total_strokes'], s['rounds_played'], s.get('payout', 0)]
            for s in standings
        ]
        return self._write_rows(ws, rows)

    def save(self):
        if not self.workbook:
            self.load_or_create_workbook()
        if not self.workbook.sheetnames:
            self.workbook.create_sheet('Leaderboard')
        self.workbook.save(self.file_path)
        logger.info("Workbook saved to %s", self.file_path)
        return self.file_path

    def read_sheet(self, title):
        """Rows of a sheet as lists, header first"""
        if not self.workbook:
            self.load_or_create_workbook()
        return [list(row) for row in self.workbook[title].iter_rows(values_only=True)]
