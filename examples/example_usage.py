# examples/example_usage.py
import json
import logging

from wasi_listings import (
    ScraperError,
    get_high_quality_image,
    get_thumbnail_image,
    scrape_property,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main():
    # Example URLs for the supported platforms
    example_urls = [
        # Wasi listing page
        "https://info.wasi.co/apartamento-alquiler-san-bernardino-caracas/5541230",

        # Remax Habitat (served by the Wasi platform)
        "https://www.remaxhabitat.com/casa-venta-la-lagunita-el-hatillo/8723451",
    ]

    results = []
    errors = []

    for url in example_urls:
        try:
            print(f"\nProcessing: {url}")
            record = scrape_property(url)

            print(f"Found listing: {record.title}")
            print(f"Location: {record.location}")
            print(f"Price: US${record.price:,} ({record.property_type})")
            print(f"Rooms: {record.bedrooms}h/{record.bathrooms}b/{record.parking}e")

            data = record.model_dump(mode="json")
            # Gallery and card sizes for the first image
            if record.images:
                data["hero_image"] = get_high_quality_image(record.images[0])
                data["card_image"] = get_thumbnail_image(record.images[0])
            results.append(data)

        except ScraperError as e:
            print(f"Error processing {url}: {e.user_message} ({e})")
            errors.append({"url": url, "error": str(e), "error_type": type(e).__name__})

    output = {
        "results": results,
        "errors": errors,
        "total": len(example_urls),
        "successful": len(results),
        "failed": len(errors)
    }

    with open("example_results.json", "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, ensure_ascii=False)

    print(f"\nProcessed {len(example_urls)} URLs: "
          f"{len(results)} successful, {len(errors)} failed")
    print("Results saved to example_results.json")


if __name__ == "__main__":
    main()
