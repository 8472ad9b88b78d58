"""Labels every planner page through hooks. ``pdf`` is provided by makepdf."""


def label_position():
    return [pdf.page.width / 3, pdf.page.height / 2]


@pdf.hooks.on_monthly_page
def monthly(page):
    page.push(pdf.object.text(point=label_position(), text=page.date.format("%B")))


@pdf.hooks.on_weekly_page
def weekly(page):
    page.push(pdf.object.text(point=label_position(), text=f"Week {page.date.week}"))


@pdf.hooks.on_daily_page
def daily(page):
    page.push(pdf.object.text(point=label_position(), text=f"Day {page.date}"))
