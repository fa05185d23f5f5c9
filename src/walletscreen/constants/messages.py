"""User-facing bot messages."""

from typing import Final

RATE_LIMIT_ADVISORY: Final[str] = (
    "⚠️ The analysis service daily limit has been reached. "
    "Some wallets could not be analysed; try again tomorrow."
)
GENERIC_FAILURE: Final[str] = (
    "❌ An error occurred while analysing a batch of wallets. "
    "That batch was skipped."
)
NO_QUALIFYING_WALLETS: Final[str] = "❌ *No wallets matched your conditions.*"
RESULTS_HEADER: Final[str] = "✅ *Processed results:*"
PROGRESS_TEMPLATE: Final[str] = "🔄 Processing... {percent}% complete."

SUBMISSION_ACCEPTED: Final[str] = (
    "We received the wallets. Please wait, this can take a few minutes "
    "while the data is processed."
)
ASK_WALLETS: Final[str] = "Please send the list of wallets (one per line)."
NO_WALLETS_IN_MESSAGE: Final[str] = "No wallet addresses found. Send one address per line."
CONFIGURE_FIRST: Final[str] = (
    "To use this command, first configure your conditions with /configure."
)
NO_CONFIGURATION: Final[str] = (
    "You have no conditions configured. Use /configure to get started."
)
CANCELLED: Final[str] = "Cancelled."
NOTHING_TO_CANCEL: Final[str] = "Nothing to cancel."
UNKNOWN_INPUT: Final[str] = "Use /scrape, /configure or /show_config."
HELP: Final[str] = (
    "/scrape - Screen a list of wallets\n"
    "/configure - Configure your conditions\n"
    "/show_config - Show your current conditions\n"
    "/cancel - Cancel the current step"
)

# Configuration wizard
WIZARD_INTRO: Final[str] = (
    "Let's configure your conditions.\n"
    "First, what is the minimum average trading time in minutes?"
)
ASK_NET_PL: Final[str] = "What is the minimum net profit (Net PL) in SOL?"
ASK_BALANCE: Final[str] = "What is the minimum current balance in SOL?"
ASK_WIN_RATE: Final[str] = "What is the minimum win rate percentage?"
ASK_LAST_TRADE_DAYS: Final[str] = "At most how many days ago must the last trade be?"

INVALID_AVG_TIME: Final[str] = "Please enter a valid number of minutes for the average trading time."
INVALID_NET_PL: Final[str] = "Please enter a valid number for the minimum net profit."
INVALID_BALANCE: Final[str] = "Please enter a valid number for the minimum current balance."
INVALID_WIN_RATE: Final[str] = "Please enter a valid percentage between 0 and 100."
INVALID_LAST_TRADE_DAYS: Final[str] = "Please enter a valid number of days."

CONFIGURED_HEADER: Final[str] = "Conditions configured!"
CURRENT_CONFIG_HEADER: Final[str] = "Your current configuration:"
CRITERIA_SUMMARY_TEMPLATE: Final[str] = (
    "Average trading time: {avg_time} minutes\n"
    "Minimum net profit: {net_pl} SOL\n"
    "Minimum current balance: {balance} SOL\n"
    "Minimum win rate: {win_rate}%\n"
    "Maximum days since last trade: {last_trade_days} days"
)
STORAGE_FAILURE: Final[str] = "❌ Your conditions could not be saved. Please try again later."
