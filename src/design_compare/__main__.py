from design_compare.runner.commands.serve import serve

if __name__ == "__main__":
    serve()
