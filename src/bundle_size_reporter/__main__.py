from bundle_size_reporter.cli import main

if __name__ == "__main__":
    main()
