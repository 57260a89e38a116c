"""
Ingestion boundary: turns raw JSON records into validated models.

Modules
-------
records : load_dataset() + parse_investments() + parse_sales_points():
          key-style and conversion-scale normalization, then validation.
"""
