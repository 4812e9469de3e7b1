from app.customer_management import create_app

app = create_app()
