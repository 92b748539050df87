from PyQt5.QtWidgets import *
from PyQt5.QtCore import QTimer
from PyQt5 import QtCore, QtGui
import sys

from cryptobench.analysis import BenchmarkAnalysis
from cryptobench.benchmark_data import HierarchyNode, JmhMode, mode_label
from cryptobench.comparator import filter_by_mode
from cryptobench.util import COMPARISON_COLUMNS, comparison_rows, get_csv

DELTA_COLUMN = COMPARISON_COLUMNS.index('Δ (%)')

class DropdownSelect(QToolButton):
    def __init__(self, toolbar: QToolBar, main_window: QMainWindow):
        super().__init__()
        self.setMenu(QMenu())
        self.setText(None)
        self.setPopupMode(QToolButton.InstantPopup)
        self.main_window = main_window
        self._group = QActionGroup(main_window)
        self._group.setExclusive(True)
        toolbar.addWidget(self)

    def addAction(self, text: str, func=None, data=None) -> 'DropdownSelect':
        assert type(text) is str, f"'{text}' is not a str. {type(text)}"
        action = QAction(text, self.main_window)
        action.setCheckable(True)
        action.setData(data)
        self.menu().addAction(action)

        self._group.addAction(action)

        if self.text() == '':
            self.setText(text)
            action.setChecked(True)

        def select_button():
            sender_action: QAction = self.main_window.sender()
            self.setText(sender_action.text())
            sender_action.setChecked(True)

        action.triggered.connect(select_button)
        if func is not None:
            action.triggered.connect(func)
        return self

class Table(QTableWidget):
    def keyPressEvent(self, event):
        if event.matches(QtGui.QKeySequence.Copy):
            self.copy()
        else:
            super().keyPressEvent(event)

    def copy(self) -> None:
        matrix = self.get_selected_matrix()
        if matrix is None:
            return
        QApplication.clipboard().setText(get_csv(matrix, deliminator='\t').decode())

    def get_selected_matrix(self) -> list[list[str]] | None:
        selected_ranges = self.selectedRanges()
        if not selected_ranges:
            return None
        selected_range = selected_ranges[0]
        columns = range(selected_range.leftColumn(), selected_range.rightColumn() + 1)
        matrix = [[self.horizontalHeaderItem(col).text() for col in columns]]
        for row in range(selected_range.topRow(), selected_range.bottomRow() + 1):
            matrix.append([self.item(row, col).text() for col in columns])
        return matrix

def cell_text_to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return float('NaN')

def lerp(t: float, a: float, b: float) -> float:
    return (1.0 - t)*a + t*b

def get_text_color(
    value: float,
    mode: str | None,
    default_color: QtGui.QColor,

    peak_red_color=QtGui.QColor(255, 85, 85),
    peak_green_color=QtGui.QColor(0, 255, 128),
    peak_delta_value=20.0
) -> QtGui.QColor:
    """Uses the delta and the mode of a row to get the color of its delta cell.

    If value is NaN, returns ```default_color```.
    Otherwise value is lerped between ```peak_red_color```, ```default_color``` and ```peak_green_color```,
    where a positive delta is good for throughput and bad for every other mode.

    Args:
        value:
            Delta of the alternate provider against the baseline, in percent.
        mode:
            JMH mode of the row.
        default_color:
            Default color of QT text, used when value is missing.

        peak_red_color:
            Red color used for interpolation when the alternate provider is slower.
        peak_green_color:
            Green color used for interpolation when the alternate provider is faster.
        peak_delta_value:
            Magnitude of value at which the peak color is reached.
    """
    if value != value:
        return default_color

    t = value / peak_delta_value
    t = max(min(t, 1.0), -1.0)
    if mode == JmhMode.THROUGHPUT:
        t = -t
    if t < 0.0:
        t = abs(t)
        selected_color = peak_green_color
    else:
        selected_color = peak_red_color
    return QtGui.QColor(
        int(lerp(t, default_color.red(),   selected_color.red())),
        int(lerp(t, default_color.green(), selected_color.green())),
        int(lerp(t, default_color.blue(),  selected_color.blue()))
    )

class MainWindow(QMainWindow):
    """Main application window for cryptobench.

    Attributes:
        analysis (BenchmarkAnalysis):
            Comparisons and the hierarchy over them.
        mode (str | None):
            JMH mode currently shown, None for every mode.
        selected_node (HierarchyNode):
            Tree node whose comparisons are listed.

        table (Table):
            Table listing the comparisons of the selected node.
        tree (QTreeWidget):
            Tree built from the hierarchy.
        toolbar (QToolBar):
            Mode selection and CSV export.
        splitter (QSplitter):
            Splits the window between the tree and the table.
    """
    def __init__(self, analysis: BenchmarkAnalysis):
        super().__init__()
        self.analysis = analysis
        self.selected_node = analysis.hierarchy
        modes = analysis.modes
        self.mode: str | None = modes[0] if len(modes) != 0 else None

        self.table = Table()
        self.tree = self.init_tree()
        self.toolbar = self.init_toolbar(modes)

        self.tree.selectionModel().selectionChanged.connect(self.selection_change)

        self.splitter = QSplitter()
        self.splitter.addWidget(self.tree)
        self.splitter.addWidget(self.table)
        self.setCentralWidget(self.splitter)
        self.setWindowTitle('cryptobench')

        self.modify_table()
        QTimer.singleShot(0, self.set_split_sizes)

    def init_tree(self) -> QTreeWidget:
        tree = QTreeWidget()
        tree.model().setHeaderData(0, QtCore.Qt.Horizontal, 'Benchmarks')
        tree.setSelectionMode(QAbstractItemView.SingleSelection)
        root_item = QTreeWidgetItem(tree)
        self.build_tree(root_item, self.analysis.hierarchy)
        root_item.setExpanded(True)
        return tree

    def build_tree(self, item: QTreeWidgetItem, node: HierarchyNode):
        item.setText(0, f'{node.name} ({len(node.comparisons)})')
        item.setData(0, QtCore.Qt.UserRole, node)
        item.setToolTip(0, node.path)
        for child in node.children:
            self.build_tree(QTreeWidgetItem(item), child)

    def init_toolbar(self, modes: list[str]) -> QToolBar:
        toolbar = QToolBar('Main Toolbar')
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        mode_dropdown = DropdownSelect(toolbar, self)
        for mode in modes:
            mode_dropdown.addAction(mode_label(mode), self.change_mode, data=mode)
        mode_dropdown.addAction('All modes', self.change_mode, data=None)

        export_to_csv_button = QToolButton()
        export_to_csv_button.setText('CSV')
        export_to_csv_button.clicked.connect(self.export_to_csv)
        toolbar.addWidget(export_to_csv_button)
        return toolbar

    def shown_comparisons(self):
        comparisons = self.selected_node.comparisons
        if self.mode is None:
            return list(comparisons)
        return filter_by_mode(comparisons, self.mode)

    def modify_table(self):
        comparisons = self.shown_comparisons()
        header, *rows = comparison_rows(comparisons)

        self.table.clear()
        self.table.setColumnCount(len(header))
        self.table.setRowCount(len(rows))
        self.table.setHorizontalHeaderLabels(header)

        default_color = self.table.palette().color(QtGui.QPalette.Text)
        for j, (comparison, row) in enumerate(zip(comparisons, rows)):
            for i, text in enumerate(row):
                item = QTableWidgetItem(text)
                if i == DELTA_COLUMN:
                    item_color = get_text_color(cell_text_to_float(text), comparison.jmh_mode, default_color)
                    item.setForeground(QtGui.QBrush(item_color))
                item.setFlags(item.flags() & ~QtCore.Qt.ItemFlag.ItemIsEditable)
                self.table.setItem(j, i, item)

        self.table.resizeColumnsToContents()

    def to_matrix(self) -> list[list[str]]:
        return comparison_rows(self.shown_comparisons())

    def export_to_csv(self):
        file = QFileDialog(self)
        file.saveFileContent(get_csv(self.to_matrix()), 'benchmark.csv')

    def change_mode(self):
        action: QAction = self.sender()
        self.mode = action.data()
        self.modify_table()

    def selection_change(self, selected: QtCore.QItemSelection, deselected: QtCore.QItemSelection):
        for index in selected.indexes():
            item = self.tree.itemFromIndex(index)
            node: HierarchyNode | None = item.data(0, QtCore.Qt.UserRole)
            if node is not None:
                self.selected_node = node
        self.modify_table()

    def set_split_sizes(self):
        total = self.splitter.width()
        left = int(total * 0.3)
        right = total - left
        self.splitter.setSizes([left, right])

def show_gui(analysis: BenchmarkAnalysis) -> int:
    """Display the provider comparison GUI.

    Args:
        analysis (BenchmarkAnalysis):
            Comparisons and the hierarchy to navigate them.

    Returns:
        int: Exit code from ``QApplication.exec_()``.
    """
    app = QApplication(sys.argv)
    window = MainWindow(analysis)
    window.show()
    return app.exec_()
