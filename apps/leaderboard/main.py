import argparse, asyncio, os, sys
from packages.config.env import load_cfg
from packages.config.board import load_board_cfg
from packages.config.constants import DEFAULT_ENV, DEFAULT_BOARD_CFG
from packages.config.logging import setup_logging
from packages.leaderboard.errors import LeaderboardError, LoadError, WriteError
from packages.leaderboard.fetchers import make_fetcher
from packages.leaderboard.store import DocumentStore, load_document_from_url
from packages.leaderboard.updater import LeaderboardUpdater, add_entry, remove_entry
from packages.renderer.controller import LeaderboardPage, TableController
from packages.renderer.html import render_page
from packages.renderer.table import COLUMNS
from packages.renderer.text import format_text_table


log = setup_logging()

def make_loader(source: str):
    if source.startswith(("http://", "https://")):
        return lambda: load_document_from_url(source)

    async def load_file():
        return DocumentStore(source).load()
    return load_file

async def run_update(args):
    log.info("=== UPDATE LEADERBOARD ===")
    cfg = load_cfg(args.env)
    board = load_board_cfg(args.config)
    log.info("Config loaded", leaderboard_file=cfg.leaderboard_file, fetcher=cfg.fetcher,
             timeout_sec=cfg.fetch_timeout_sec, concurrency=cfg.fetch_concurrency)

    fetcher = make_fetcher(cfg.fetcher, board.fetcher, cfg.fetch_timeout_sec, cfg.debug_screenshot_dir)
    updater = LeaderboardUpdater(fetch_timeout_sec=cfg.fetch_timeout_sec, concurrency=cfg.fetch_concurrency)
    report = await updater.run_cycle(DocumentStore(cfg.leaderboard_file), fetcher)
    print(f"Updated {report.updated}, unchanged {report.unchanged}")

async def _page(args, source):
    board = load_board_cfg(args.config)
    page = LeaderboardPage(make_loader(source), TableController(parse_k_suffix=board.sort.parse_k_suffix))
    await page.load()
    return page, board

def page_source(source: str, out_path: str) -> str:
    """Where the written page re-reads the document from: the URL, or a path relative to the page."""
    if source.startswith(("http://", "https://")):
        return source
    rel = os.path.relpath(os.path.abspath(source), os.path.dirname(os.path.abspath(out_path)))
    return rel.replace(os.sep, "/")

async def run_render(args):
    log.info("=== RENDER LEADERBOARD ===")
    cfg = load_cfg(args.env)
    source = args.source or cfg.leaderboard_file
    out_path = args.out or cfg.html_output
    page, board = await _page(args, source)
    if page.status == "error" and os.path.exists(out_path):
        log.error("Load failed, keeping previous page", path=out_path)
        raise LoadError(source, page.message)
    generated_at = page.document.generated_at if page.document else None
    text = render_page(page.view, page.status, page.message, generated_at,
                       board.sort.parse_k_suffix, page_source(source, out_path))
    try:
        os.makedirs(os.path.dirname(os.path.abspath(out_path)), exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(out_path, str(e)) from e
    log.info("Page written", path=out_path, status=page.status, rows=len(page.view.rows))
    if page.status == "error":
        raise LoadError(source, page.message)

async def run_show(args):
    cfg = load_cfg(args.env)
    page, _ = await _page(args, args.source or cfg.leaderboard_file)
    if page.status == "error":
        print(page.message)
        sys.exit(1)
    if args.sort is not None:
        page.controller.click(args.sort)
        if args.desc:
            page.controller.click(args.sort)
    print(format_text_table(page.view))

async def run_add(args):
    cfg = load_cfg(args.env)
    store = DocumentStore(cfg.leaderboard_file)
    doc = store.load()
    entry = add_entry(doc, args.name, args.url, args.points)
    store.save(doc)
    log.info("Entry added", name=entry.name, rank=entry.rank)

async def run_remove(args):
    cfg = load_cfg(args.env)
    store = DocumentStore(cfg.leaderboard_file)
    doc = store.load()
    if not remove_entry(doc, args.name):
        log.warning("No entry with that name", name=args.name)
        sys.exit(1)
    store.save(doc)
    log.info("Entry removed", name=args.name)

def main():
    ap = argparse.ArgumentParser(prog="ep-leaderboard")
    ap.add_argument("--env", default=DEFAULT_ENV, help="dotenv file with paths and fetch settings")
    ap.add_argument("--config", default=DEFAULT_BOARD_CFG, help="yaml tuning file")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG","INFO","WARNING","ERROR"])
    sub = ap.add_subparsers(dest="cmd")

    u = sub.add_parser("update", help="refresh points once and exit")
    u.set_defaults(func=run_update)

    r = sub.add_parser("render", help="write the HTML page once")
    r.add_argument("--source", help="document path or http(s) URL")
    r.add_argument("--out")
    r.set_defaults(func=run_render)

    s = sub.add_parser("show", help="print the table")
    s.add_argument("--source", help="document path or http(s) URL")
    s.add_argument("--sort", type=int, choices=range(len(COLUMNS)), help="column index: 0 rank, 1 name, 2 points, 3 behind")
    s.add_argument("--desc", action="store_true")
    s.set_defaults(func=run_show)

    a = sub.add_parser("add")
    a.add_argument("--name", required=True)
    a.add_argument("--url", required=True)
    a.add_argument("--points", type=int)
    a.set_defaults(func=run_add)

    rm = sub.add_parser("remove")
    rm.add_argument("--name", required=True)
    rm.set_defaults(func=run_remove)

    args = ap.parse_args()
    setup_logging(args.log_level)
    if not getattr(args, "func", None):
        ap.print_help(); return
    try:
        asyncio.run(args.func(args))
    except LeaderboardError as e:
        log.error("Leaderboard command failed", cmd=args.cmd, error=str(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
