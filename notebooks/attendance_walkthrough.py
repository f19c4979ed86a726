"""
Restaurant attendance: marimo walkthrough

Builds the three-panel attendance figure step by step: load, recode BYOB,
summarise, draw each panel on its own, compose, export a 600 dpi TIFF.

Run:
  marimo edit notebooks/attendance_walkthrough.py
  marimo run notebooks/attendance_walkthrough.py

Requires: pip install -e ".[notebook]"
"""

import marimo

__generated_with = "0.19.11"
app = marimo.App(width="medium")


@app.cell(hide_code=True)
def _():
    import marimo as mo

    from attendance_figure import data as tables
    from attendance_figure.figure import (
        DEFAULT_OUTPUT,
        PANEL_LABELS,
        PANEL_LAYOUT,
        compose_figure,
        export_tiff,
        figure_canvas,
        make_drawers,
        prepare_panels,
    )
    from attendance_figure.inspect_figure import analyze_image
    from attendance_figure.panels import draw_byob_bars, draw_population_boxes, draw_size_scatter

    return (
        DEFAULT_OUTPUT,
        PANEL_LABELS,
        PANEL_LAYOUT,
        analyze_image,
        compose_figure,
        draw_byob_bars,
        draw_population_boxes,
        draw_size_scatter,
        export_tiff,
        figure_canvas,
        make_drawers,
        mo,
        prepare_panels,
        tables,
    )


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
        ## 1. The data

        Each row is one restaurant: its state, its city, the city's
        population, the restaurant's size, its attendance, and whether it
        lets guests bring their own bottle (BYOB). The table is small and
        complete, so it is read in one go. Set `source` to a CSV URL (or a
        local path) to read another copy; `None` uses the bundled file.
        """
    )
    return


@app.cell
def _(tables):
    source = None
    raw = tables.load_restaurants(source)
    raw.head()
    return (raw,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
        ## 2. BYOB is a category, not a number

        BYOB arrives as 0/1 and pandas reads it as an integer column. Grouped
        by, or mapped to colour, it behaves like a continuous quantity: the
        plot below gets a colour *gradient* from 0 to 1 instead of two
        classes. Recode it first. The levels stay 0 and 1; the words No and
        Yes are only added when drawing.
        """
    )
    return


@app.cell
def _(figure_canvas, raw, tables):
    with figure_canvas(width_in=4, height_in=2.5, dpi=100) as _fig:
        _ax = _fig.add_subplot(1, 1, 1)
        _points = _ax.scatter(raw[tables.SIZE], raw[tables.ATTENDANCE], c=raw[tables.BYOB], s=10)
        _fig.colorbar(_points, ax=_ax, label="BYOB (as a number)")
        _ax.set_title("Before recoding: a meaningless gradient")
    _fig
    return


@app.cell
def _(raw, tables):
    restaurants = tables.recode_byob(raw)
    restaurants[tables.BYOB].dtype
    return (restaurants,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
        ## 3. Mean and standard error per state and BYOB

        The standard error is the sample standard deviation divided by the
        square root of the group size.
        """
    )
    return


@app.cell
def _(restaurants, tables):
    summary = tables.summarize_attendance(restaurants)
    summary
    return (summary,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
        ## 4. Three panels

        **A** is a grouped bar chart of the summary with error bars.

        **B** plots size against attendance. MA and NH show a clear upward
        trend; VT does not, so its points are drawn without a line. That
        choice is made by looking at the plot, not by a test.

        **C** would naively be a scatter of population against attendance,
        but every restaurant in a city shares one population figure, so the
        points pile up in vertical stacks. One box per city says the same
        thing more clearly. A logarithmic trend runs through the boxes and
        three outliers are labelled by hand; the label positions were found
        by trial and error.
        """
    )
    return


@app.cell
def _(
    draw_byob_bars,
    draw_population_boxes,
    draw_size_scatter,
    figure_canvas,
    restaurants,
    summary,
    tables,
):
    _trends = tables.fit_linear_trends(restaurants, exclude=tables.TRENDLESS_STATE)
    _groups = tables.city_groups(restaurants)
    _log_fit = tables.fit_log_trend(restaurants)
    with figure_canvas(width_in=9, height_in=3, dpi=100) as panels_preview:
        _axes = panels_preview.subplots(1, 3)
        draw_byob_bars(_axes[0], summary)
        draw_size_scatter(_axes[1], restaurants, _trends)
        draw_population_boxes(_axes[2], _groups, _log_fit)
    panels_preview
    return


@app.cell(hide_code=True)
def _(PANEL_LAYOUT, mo):
    mo.md(
        f"""
        ## 5. One page

        The layout is a small matrix of panel ids: `{PANEL_LAYOUT}`.
        Panels 1 and 2 stack on the left; panel 3 spans the two right
        columns. Each panel gets a corner letter so a caption can refer to
        it. A matrix that names a panel we did not draw (or leaves one out)
        is an error, not a silently missing panel.
        """
    )
    return


@app.cell
def _(
    DEFAULT_OUTPUT,
    PANEL_LABELS,
    PANEL_LAYOUT,
    compose_figure,
    export_tiff,
    figure_canvas,
    make_drawers,
    prepare_panels,
    raw,
):
    prepared = prepare_panels(raw)
    with figure_canvas() as page:
        compose_figure(page, make_drawers(prepared), layout=PANEL_LAYOUT, labels=PANEL_LABELS)
        output = export_tiff(page, DEFAULT_OUTPUT)
    page
    return (output,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
        ## 6. Check the file

        The TIFF should be 6 x 4.5 inches at 600 dpi, i.e. 3600 x 2700
        pixels, whatever the local matplotlib defaults are.
        """
    )
    return


@app.cell
def _(analyze_image, output):
    analyze_image(output)
    return


if __name__ == "__main__":
    app.run()
