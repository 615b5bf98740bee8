import sys

import rclpy
from rclpy.logging import get_logger
from rclpy.node import Node
from rclpy.utilities import remove_ros_args
from sensor_msgs.msg import CompressedImage
import cv2

from tape_vision.utils import ConfigError, camera_properties, read_config
from tape_vision.utils.config_utils import config_file_from_argv


class CameraPublisher(Node):
    def __init__(self, camera_config, image_topic="/image_raw/compressed"):
        super().__init__("camera_publisher")

        self.camera_name = camera_config["name"]
        path = camera_config["path"]
        self.get_logger().info(f"Starting camera '{self.camera_name}' on {path}")

        # "/dev/video0" style paths and plain device indices both work
        self.capture = cv2.VideoCapture(int(path) if path.isdigit() else path)
        if not self.capture.isOpened():
            self.get_logger().error(f"Could not open camera '{self.camera_name}' on {path}")

        for prop, value in camera_properties(camera_config):
            if not self.capture.set(prop, value):
                self.get_logger().warning(
                    f"Camera '{self.camera_name}' rejected property {prop} = {value}"
                )

        self.jpeg_quality = int(camera_config["stream"].get("quality", 90))

        self.image_pub = self.create_publisher(CompressedImage, image_topic, 1)
        self.capture_timer = self.create_timer(1.0 / camera_config["fps"], self.capture_step)

    def capture_step(self):
        """Grab one frame and publish it as JPEG."""
        ret, frame = self.capture.read()
        if not ret:
            self.get_logger().warning("Camera read failed", throttle_duration_sec=5.0)
            return

        ok, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not ok:
            self.get_logger().warning("JPEG encode failed")
            return

        msg = CompressedImage()
        msg.header.stamp = self.get_clock().now().to_msg()
        msg.header.frame_id = self.camera_name
        msg.format = "jpeg"
        msg.data = buffer.tobytes()
        self.image_pub.publish(msg)

    def destroy_node(self):
        self.capture.release()
        super().destroy_node()


def main(args=None):
    rclpy.init(args=args)
    argv = remove_ros_args(args=args if args is not None else sys.argv)
    config_file = config_file_from_argv(argv)

    try:
        config = read_config(config_file)
    except ConfigError as e:
        get_logger("camera_publisher").error(str(e))
        rclpy.shutdown()
        return

    if not config["cameras"]:
        get_logger("camera_publisher").error(f"No cameras configured in '{config_file}'")
        rclpy.shutdown()
        return

    if not config["publisher"]["compressed"]:
        get_logger("camera_publisher").warning(
            "publisher.compressed is false but this node publishes CompressedImage"
        )

    # Processing runs on camera 0 only
    node = CameraPublisher(config["cameras"][0], config["publisher"]["image_topic"])
    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":
    main()
