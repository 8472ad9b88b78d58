"""
Planner with a monthly calendar, weekly reflection pages and daily pages,
sized for a small e-ink tablet. Run with ``--script makepdf:planner``.

``pdf`` is provided by makepdf when the script runs.
"""

pdf.page.font_size = 6.5  # points, not millimetres

PAGE_PADDING = 5
SPACING = 0.5
LINES = ["1", "2", "3"]
DAY_LETTERS = {
    "monday": "M",
    "tuesday": "T",
    "wednesday": "W",
    "thursday": "R",
    "friday": "F",
    "saturday": "S",
    "sunday": "U",
}


def page_grid():
    return pdf.utils.grid(pdf.page.bounds().with_padding(PAGE_PADDING), rows=35, columns=7)


def make_section(bounds, label, on_inner=None):
    return pdf.object.section(
        bounds=bounds,
        header={"text": label, "foreground": "#FFFFFF"},
        outline_dash_pattern="dashed:1",
        outline_color=pdf.page.fill_color,
        outline_thickness=0,
        padding=1,
        on_inner=on_inner,
    )


def make_lined_section(bounds, label, lines=LINES):
    def fill(inner, group):
        group.append(
            pdf.object.lined_list(
                bounds=inner,
                rows=lines,
                line_color=pdf.page.fill_color,
                text_color=pdf.page.fill_color,
            )
        )

    return make_section(bounds, label, on_inner=fill)


def make_single_line(bounds, text=""):
    return pdf.object.lined_list(
        bounds=bounds,
        rows=[text],
        line_color=pdf.page.fill_color,
        text_color=pdf.page.fill_color,
    )


def make_heading(bounds, label, link=None):
    return pdf.object.rect_text(
        rect={"bounds": bounds},
        text={"text": label, "color": "#FFFFFF"},
        link=link,
    )


def make_habit_rect(bounds):
    corner = bounds.scale_by_factor(width=0.25, height=0.25)
    fill = pdf.utils.color(pdf.page.fill_color).lighten(0.5)
    habit = pdf.object.rect_text(
        rect={"bounds": corner, "fill_color": fill},
        text={"text": "H", "color": "#FFFFFF"},
    )
    return pdf.object.align_to(habit, bounds, {"v": "bottom", "h": "right"})


def make_cross_section(bounds, label, items):
    def fill(inner, group):
        mid_x = inner.llx + inner.width() / 2
        mid_y = inner.lly + inner.height() / 2
        color = pdf.page.fill_color
        group.append(pdf.object.line(points=[[mid_x, inner.lly], [mid_x, inner.ury]], color=color))
        group.append(pdf.object.line(points=[[inner.llx, mid_y], [inner.urx, mid_y]], color=color))
        cells = pdf.utils.grid(inner, rows=2, columns=2, padding=1)
        for i, item in enumerate(items):
            cell = cells.cell(row=i // 2 + 1, col=i % 2 + 1)
            text = pdf.object.text(text=item)
            group.append(pdf.object.align_to(text, cell, {"v": "top", "h": "left"}))

    return make_section(bounds, label, on_inner=fill)


def make_daily_circles(bounds, days):
    grid = pdf.utils.grid(bounds, rows=1, columns=7)
    objects = []
    for i, letter in enumerate(["M", "T", "W", "R", "F", "S", "U"], start=1):
        page_id = days.get(letter)
        if page_id is None:
            continue
        cell = grid.cell(row=1, col=i)
        center = cell.center()
        letter_text = pdf.object.text(text=letter, color="#FFFFFF")
        objects.append(
            pdf.object.group(
                [
                    pdf.object.circle(
                        center=[center.x, center.y],
                        radius=min(cell.width(), cell.height()) / 2,
                    ),
                    pdf.object.align_to(letter_text, cell),
                ],
                link=page_id,
            )
        )
    return pdf.object.group(objects)


planner = pdf.pages.setup_planner()


def monthly_page(page, date):
    pdf.log.debug("Populating monthly page", date.format("%B %Y"))
    grid = page_grid()

    page.push(make_heading(grid.cell(row=1, col=1).with_padding(SPACING), "MONTH"))
    page.push(make_single_line(grid.cell(row=1, col=2, width=2).with_padding(SPACING), date.format("%B %Y")))
    page.push(make_heading(grid.cell(row=1, col=4).with_padding(SPACING), "FOCUS"))
    page.push(make_single_line(grid.cell(row=1, col=5).with_padding(SPACING)))
    page.push(make_heading(grid.cell(row=1, col=6).with_padding(SPACING), "HABIT"))
    page.push(make_single_line(grid.cell(row=1, col=7).with_padding(SPACING)))

    def on_day_block(day, group):
        if day is None:
            return
        target = planner.get_daily_page(day)
        if target is not None:
            group.link = target.id
        group.append(make_habit_rect(group.bounds()))

    page.push(
        pdf.object.calendar(
            bounds=grid.cell(row=3, col=1, width=7, height=21),
            month=date,
            on_day_block=on_day_block,
        )
    )

    page.push(make_heading(grid.cell(row=25, col=1, width=7), "PLAN"))
    page.push(make_lined_section(grid.cell(row=26.25, col=1, width=3.25, height=4), "THIS MONTH'S GOALS"))
    page.push(make_lined_section(grid.cell(row=26.25, col=4.75, width=3.25, height=4), "DISTRACTIONS TO AVOID"))

    page.push(make_heading(grid.cell(row=31, col=1, width=7), "REVIEW"))
    page.push(make_lined_section(grid.cell(row=32.25, col=1, width=3.25, height=4), "THIS MONTH'S WINS"))
    page.push(make_lined_section(grid.cell(row=32.25, col=4.75, width=3.25, height=4), "INSIGHTS GAINED"))


def weekly_page(page, date):
    start, end = pdf.utils.start_end_week(date)
    week_str = f"{date.format('%b %d')} to {end.format('%b %d')}"
    pdf.log.debug("Populating weekly page", week_str, date.format("%Y"))
    grid = page_grid()

    days = {}
    for offset in range(end.ordinal - start.ordinal + 1):
        day = start.add_days(offset)
        day_page = planner.get_daily_page(day)
        if day_page is not None:
            days[DAY_LETTERS[day.weekday.long_name()]] = day_page.id

    page.push(make_heading(grid.cell(row=1, col=1).with_padding(SPACING), "WEEK"))
    month_page = planner.get_monthly_page(date)
    page.push(
        pdf.object.group(
            [make_single_line(grid.cell(row=1, col=2, width=2).with_padding(SPACING), week_str)],
            link=month_page.id if month_page else None,
        )
    )
    page.push(make_daily_circles(grid.cell(row=1, col=4, width=4).with_padding(SPACING), days))

    page.push(make_heading(grid.cell(row=3, col=1, width=7), "REFLECTION FROM LAST WEEK"))
    page.push(make_lined_section(grid.cell(row=4.25, col=1, width=3.25, height=4), "BIG WINS"))
    page.push(make_lined_section(grid.cell(row=4.25, col=4.75, width=3.25, height=4), "HOW I'LL IMPROVE"))

    page.push(make_heading(grid.cell(row=9, col=1, width=7), "PLANNING FOR THIS WEEK"))
    page.push(
        make_cross_section(
            grid.cell(row=10.25, col=1, width=7, height=16),
            "THINGS I WILL DO TO MAKE THIS WEEK GREAT",
            ["PERSONAL", "WORK", "FAMILY / FRIENDS", "RELATIONSHIP"],
        )
    )
    page.push(make_lined_section(grid.cell(row=27, col=1, width=3.25, height=4), "I'M LOOKING FORWARD TO"))
    page.push(
        make_lined_section(grid.cell(row=27, col=4.75, width=3.25, height=4), "HABITS I'M FOCUSING ON DEVELOPING")
    )
    page.push(make_section(grid.cell(row=32, col=1, width=3.25, height=4), "LEARN SOMETHING NEW"))
    page.push(make_section(grid.cell(row=32, col=4.75, width=3.25, height=4), "PASSION PROJECT"))


def daily_page(page, date):
    pdf.log.debug("Populating daily page", date.format("%B %d, %Y (%a)"))
    grid = page_grid()
    month_page = planner.get_monthly_page(date)
    week_page = planner.get_weekly_page(date)

    page.push(make_heading(grid.cell(row=1, col=1).with_padding(SPACING), "DAY"))
    page.push(make_single_line(grid.cell(row=1, col=2, width=2).with_padding(SPACING), date.format("%B %d (%a)")))
    page.push(
        make_heading(
            grid.cell(row=1, col=4, width=2).with_padding(SPACING),
            "GO TO MONTH",
            link=month_page.id if month_page else None,
        )
    )
    page.push(
        make_heading(
            grid.cell(row=1, col=6, width=2).with_padding(SPACING),
            "GO TO WEEK",
            link=week_page.id if week_page else None,
        )
    )

    page.push(make_heading(grid.cell(row=3, col=1, width=7), "MORNING REVIEW"))
    page.push(make_lined_section(grid.cell(row=4.25, col=1, width=3.25, height=4), "I'M GRATEFUL FOR"))
    page.push(make_lined_section(grid.cell(row=4.25, col=4.75, width=3.25, height=4), "I'M EXCITED ABOUT"))
    page.push(make_section(grid.cell(row=9, col=1, width=2.2, height=3), "AFFIRMATION"))
    page.push(make_section(grid.cell(row=9, col=3.4, width=2.2, height=3), "FOCUS"))
    page.push(make_section(grid.cell(row=9, col=5.8, width=2.2, height=3), "EXERCISE"))

    page.push(make_heading(grid.cell(row=13, col=1, width=7), "TODAY'S PRIORITIES"))
    page.push(make_section(grid.cell(row=14.25, col=1, width=3.25, height=6), "PRIORITY 1"))
    page.push(make_section(grid.cell(row=14.25, col=4.75, width=3.25, height=6), "PRIORITY 2"))
    page.push(make_section(grid.cell(row=20.5, col=1, width=3.25, height=6), "PRIORITY 3"))
    page.push(make_section(grid.cell(row=20.5, col=4.75, width=3.25, height=6), "PRIORITY 4"))

    page.push(make_heading(grid.cell(row=27, col=1, width=7), "END OF DAY REVIEW"))
    page.push(make_lined_section(grid.cell(row=28.25, col=1, width=7, height=4), "TODAY'S WINS"))
    page.push(make_lined_section(grid.cell(row=33, col=1, width=7, height=3), "HOW I'LL IMPROVE", ["1", "2"]))


planner.for_monthly_page(monthly_page)
planner.for_weekly_page(weekly_page)
planner.for_daily_page(daily_page)
