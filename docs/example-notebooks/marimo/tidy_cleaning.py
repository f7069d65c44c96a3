import marimo

__generated_with = "0.13.15"
app = marimo.App(width="medium")


@app.cell(hide_code=True)
def _():
    import marimo as mo

    import tidyclean as tc

    return mo, tc


@app.cell
def _(mo):
    mo.md("""
    # Cleaning a small race-timing dataset

    Two CSV exports: lap times per round (one column per player, plus the
    row numbers a spreadsheet wrote with an empty header), and a player
    roster whose id column is called something else. We'll get both into
    tidy form and join them.
    """)
    return


@app.cell
def _(tmp_dir):
    times_csv = tmp_dir / "times.csv"
    times_csv.write_text(
        ",Round,PlayerA,PlayerB\n"
        "1,1,61.2,59.8\n"
        "2,2,60.4,NA\n"
        "3,3,n/a,58.9\n")
    roster_csv = tmp_dir / "roster.csv"
    roster_csv.write_text(
        "player_code,team\n"
        "PlayerA,red\n"
        "PlayerB, blue\n"
        "PlayerC,green\n")
    return roster_csv, times_csv


@app.cell(hide_code=True)
def _():
    import tempfile
    from pathlib import Path

    tmp_dir = Path(tempfile.mkdtemp())
    return (tmp_dir,)


@app.cell
def _(mo, tc, times_csv):
    mo.md("## Reading: categories vs. strings")
    factor_df = tc.read_csv_categorical(times_csv)
    mo.md(f"""
    Read without null tokens, `PlayerA` holds the text `"n/a"` and becomes a
    category: {factor_df['PlayerA'].dtype}. Its category codes are
    `{tc.category_codes_to_numeric(factor_df['PlayerA']).to_list()}`, which
    are positions in the sorted labels, not lap times.
    """)
    return (factor_df,)


@app.cell
def _(tc, times_csv):
    times = tc.read_csv_strings(times_csv, na_values=["", "NA", "n/a"])
    times
    return (times,)


@app.cell
def _(mo, tc, times):
    mo.md("## The empty column name")
    times_named = tc.rename_column(times, "", "row")
    late_rounds = tc.filter_rows(times_named, "row >= 2")
    late_rounds
    return (times_named,)


@app.cell
def _(mo, tc, times_named):
    mo.md("## Wide to tall")
    tall = tc.wide_to_long(times_named.drop(columns=["row"]), "Round",
                           names_to="Player", values_to="Time")
    tall = tc.recode_threshold(tall, "Time", 60, labels=("fast", "slow"), new_column="Pace")
    tall
    return (tall,)


@app.cell
def _(mo, roster_csv, tall, tc):
    mo.md("## Joining on a renamed key")
    roster = tc.clean_strings(tc.read_csv_strings(roster_csv))
    mo.md(f"Key overlap: {tc.join_summary(tall, roster, on={'Player': 'player_code'})}")
    joined = tc.join_tables(tall, roster, on={"Player": "player_code"}, how="full")
    joined
    return (joined,)


@app.cell(hide_code=True)
def _(mo):
    mo.md("""
    ---

    Calling `tc.join_tables(tall, roster)` without `on=` raises a
    `JoinKeyError` because the tables share no column name; the error
    lists both sets of columns so the mapping is easy to write.
    """)
    return


if __name__ == "__main__":
    app.run()
