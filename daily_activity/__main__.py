from daily_activity.cli import app

app(prog_name="daily-activity")
