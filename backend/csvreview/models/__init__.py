from csvreview.models.csv_data import CSVFile, CSVRow

__all__ = ["CSVFile", "CSVRow"]
