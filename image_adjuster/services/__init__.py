# Services package initialization
from .analysis_service import AnalysisRecord, AnalysisService, average_limits, sort_paths
from .adjustment_service import AdjustedFile, AdjustmentSession
from .report import render_analysis_report, write_analysis_report
