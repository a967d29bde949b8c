"""Demo application routes that sit behind the CORS policy layer."""
