"""
Hooks demo: a grey square on each monthly page, plus lookups of a daily page
and the following month through the page handle.
"""


@pdf.hooks.on_monthly_page
def monthly(page):
    pdf.log.info("Processing monthly page", page.date.format("%B"))

    page.push(pdf.object.rect(ll=[0, 0], ur=[50, 50], fill_color="#999999"))

    daily = page.daily(f"{pdf.planner.year}-09-01")
    if daily is not None:
        pdf.log.info("--> Daily month is", daily.date.format("%B"))

    following = page.next_page()
    if following is not None:
        pdf.log.info("--> Next page is month", following.date.format("%B"))
