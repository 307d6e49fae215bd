from dashboard_pdf.cli import main

main()
