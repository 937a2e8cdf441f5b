# surveyforge/report_sections/__init__.py
"""
Questionnaire document sections.

Section modules are imported by report_builder only, so importing this
package stays cheap for Streamlit pages.
"""
