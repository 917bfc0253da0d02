from qandagql import create_app
import awsgi

# built once per container, shared by every invocation
app = create_app()


def lambda_handler(event, context):
    """Main entry point for API gateway."""
    return awsgi.response(app, event, context)


if __name__ == '__main__':
    app.run(debug=True)
