"""
SQL and Python fix-script templates.

Static boilerplate keyed by rule type, shown next to a ValidationResult so
a user can apply the same fix outside TableSift. Only the column name is
substituted; nothing is derived from the data.
"""

from typing import Optional

SQL_TEMPLATES = {
    "null_values": (
        "-- Fill missing values in {column}\n"
        "UPDATE your_table\n"
        "SET {column} = 'Unknown'\n"
        "WHERE {column} IS NULL OR {column} = '';\n"
        "\n"
        "-- Or remove incomplete rows\n"
        "DELETE FROM your_table WHERE {column} IS NULL;"
    ),
    "duplicates": (
        "-- Remove duplicates using ROW_NUMBER()\n"
        "WITH numbered_rows AS (\n"
        "  SELECT *,\n"
        "    ROW_NUMBER() OVER (PARTITION BY column1, column2, column3 ORDER BY id) AS row_num\n"
        "  FROM your_table\n"
        ")\n"
        "DELETE FROM your_table\n"
        "WHERE id IN (SELECT id FROM numbered_rows WHERE row_num > 1);"
    ),
}

PYTHON_TEMPLATES = {
    "null_values": (
        "import pandas as pd\n"
        "\n"
        "# Numeric columns: fill with the median, text columns: fill with 'Unknown'\n"
        "if pd.api.types.is_numeric_dtype(df['{column}']):\n"
        "    df['{column}'] = df['{column}'].fillna(df['{column}'].median())\n"
        "else:\n"
        "    df['{column}'] = df['{column}'].fillna('Unknown')"
    ),
    "duplicates": (
        "import pandas as pd\n"
        "\n"
        "print(f\"Found {{df.duplicated().sum()}} duplicate rows\")\n"
        "df_cleaned = df.drop_duplicates(keep='first')\n"
        "print(f\"Removed {{len(df) - len(df_cleaned)}} duplicate rows\")"
    ),
}


def sql_fix_for(rule_type: str, column: Optional[str] = None) -> Optional[str]:
    """SQL fix template for a rule type, or None when there is none."""
    template = SQL_TEMPLATES.get(rule_type)
    if template is None:
        return None
    return template.format(column=column or "column_name")


def python_fix_for(rule_type: str, column: Optional[str] = None) -> Optional[str]:
    """Python (pandas) fix template for a rule type, or None when there is none."""
    template = PYTHON_TEMPLATES.get(rule_type)
    if template is None:
        return None
    return template.format(column=column or "column_name")
