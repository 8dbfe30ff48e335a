DEFAULT_ENV = "configs/.env"
DEFAULT_BOARD_CFG = "configs/leaderboard.yml"
DEFAULT_HTML_OUTPUT = "ep_leaderboard/index.html"

POINTS_SELECTOR = ".energy-points-badge"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_DOCUMENT_NAME = "EP_Leaderboard.json"
