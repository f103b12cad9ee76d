"""Dashboard topics. Each subpackage contributes one page and one API route."""
