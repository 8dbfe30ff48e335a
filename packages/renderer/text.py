from .table import COLUMNS, TableView

_MARK = {"asc": " ^", "desc": " v", "unsorted": ""}

def format_text_table(view: TableView) -> str:
    titles = [t + _MARK[s] for t, s in zip(COLUMNS, view.headers)]
    grid = [titles] + [list(r.cells) for r in view.rows]
    widths = [max(len(line[i]) for line in grid) for i in range(len(COLUMNS))]
    out = []
    for n, line in enumerate(grid):
        # name column left aligned, numbers right aligned
        cells = [line[i].ljust(widths[i]) if i == 1 else line[i].rjust(widths[i]) for i in range(len(line))]
        out.append("  ".join(cells).rstrip())
        if n == 0:
            out.append("-" * (sum(widths) + 2 * (len(widths) - 1)))
    if not view.rows:
        out.append("(none)")
    return "\n".join(out)
